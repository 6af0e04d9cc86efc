"""
ontogen.runtime.constraints — SHACL Core constraint evaluation.

One library behind two entry points:
  - property_violations() collects every violation of a property on a
    focus node (deferred validation, used by generated validate routines)
  - check_value() raises on the first violation of a single value
    (immediate checks in generated builder setters)
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional

from rdflib import Literal, URIRef

from ontogen.errors import ConstraintViolation
from ontogen.runtime.literals import parse_lexical

NUMERIC_TYPES = ("int", "float")
LITERAL_TYPES = ("str", "int", "float", "bool")

_REGEX_FLAGS = {
    "i": re.IGNORECASE,
    "m": re.MULTILINE,
    "s": re.DOTALL,
    "x": re.VERBOSE,
}


@dataclass(frozen=True)
class PropertyRule:
    name: str
    path: str
    value_type: str = "str"  # str, int, float, bool, object, resource
    min_count: int = 0
    max_count: Optional[int] = None
    min_length: Optional[int] = None
    max_length: Optional[int] = None
    pattern: Optional[str] = None
    flags: Optional[str] = None
    in_values: Optional[tuple[str, ...]] = None
    min_inclusive: Optional[float] = None
    max_inclusive: Optional[float] = None
    min_exclusive: Optional[float] = None
    max_exclusive: Optional[float] = None
    has_value: Optional[str] = None

    @property
    def predicate(self) -> URIRef:
        return URIRef(self.path)


@dataclass(frozen=True)
class Violation:
    focus_node: str
    property: str
    path: str
    constraint: str  # SHACL constraint component local name, e.g. "minCount"
    message: str
    value: Optional[str] = None


@lru_cache(maxsize=256)
def _compile(pattern: str, flags: Optional[str]) -> re.Pattern:
    value = 0
    for ch in flags or "":
        value |= _REGEX_FLAGS.get(ch, 0)
    return re.compile(pattern, value)


def _fmt(bound: float) -> str:
    return str(int(bound)) if float(bound).is_integer() else str(bound)


def _violation(rule: PropertyRule, node, constraint: str, message: str, value=None) -> Violation:
    return Violation(
        focus_node=str(node),
        property=rule.name,
        path=rule.path,
        constraint=constraint,
        message=message,
        value=None if value is None else str(value),
    )


# ── Cardinality ──────────────────────────────────────────────────


def count_violations(rule: PropertyRule, node, count: int) -> list[Violation]:
    violations = []
    if count < rule.min_count:
        if rule.min_count == 1:
            message = f"{rule.name} is required (minCount=1)"
        else:
            message = (
                f"{rule.name} must have at least {rule.min_count} values "
                f"(minCount={rule.min_count}), found {count}"
            )
        violations.append(_violation(rule, node, "minCount", message))
    if rule.max_count is not None and count > rule.max_count:
        violations.append(_violation(
            rule, node, "maxCount",
            f"{rule.name} must have at most {rule.max_count} values "
            f"(maxCount={rule.max_count}), found {count}",
        ))
    return violations


# ── Values ───────────────────────────────────────────────────────


def value_violations(rule: PropertyRule, node, term) -> list[Violation]:
    """Check one value: length, pattern, membership, then numeric bounds."""
    violations: list[Violation] = []
    is_literal = isinstance(term, Literal)
    lexical = str(term)

    if is_literal and rule.min_length is not None and len(lexical) < rule.min_length:
        violations.append(_violation(
            rule, node, "minLength",
            f"{rule.name} must have length >= {rule.min_length} (minLength), "
            f"got {len(lexical)} for '{lexical}'",
            lexical,
        ))
    if is_literal and rule.max_length is not None and len(lexical) > rule.max_length:
        violations.append(_violation(
            rule, node, "maxLength",
            f"{rule.name} must have length <= {rule.max_length} (maxLength), "
            f"got {len(lexical)} for '{lexical}'",
            lexical,
        ))
    if is_literal and rule.pattern is not None and not _compile(rule.pattern, rule.flags).fullmatch(lexical):
        violations.append(_violation(
            rule, node, "pattern",
            f"{rule.name} must match pattern '{rule.pattern}' (pattern), got '{lexical}'",
            lexical,
        ))
    if rule.in_values is not None and lexical not in rule.in_values:
        violations.append(_violation(
            rule, node, "in",
            f"{rule.name} must be one of {list(rule.in_values)} (in), got '{lexical}'",
            lexical,
        ))
    if is_literal and rule.value_type in LITERAL_TYPES and rule.value_type != "str":
        violations.extend(_typed_violations(rule, node, lexical))
    return violations


def _typed_violations(rule: PropertyRule, node, lexical: str) -> list[Violation]:
    try:
        value = parse_lexical(lexical, rule.value_type)
    except ValueError:
        return [_violation(
            rule, node, "datatype",
            f"{rule.name} must be a valid {rule.value_type} (datatype), got '{lexical}'",
            lexical,
        )]
    if rule.value_type not in NUMERIC_TYPES:
        return []

    violations = []
    bounds = [
        ("minInclusive", rule.min_inclusive, lambda b: value >= b, ">="),
        ("maxInclusive", rule.max_inclusive, lambda b: value <= b, "<="),
        ("minExclusive", rule.min_exclusive, lambda b: value > b, ">"),
        ("maxExclusive", rule.max_exclusive, lambda b: value < b, "<"),
    ]
    for constraint, bound, ok, op in bounds:
        if bound is not None and not ok(bound):
            violations.append(_violation(
                rule, node, constraint,
                f"{rule.name} must be {op} {_fmt(bound)} ({constraint}), got {lexical}",
                lexical,
            ))
    return violations


# ── Entry points ─────────────────────────────────────────────────


def property_violations(rule: PropertyRule, graph, node) -> list[Violation]:
    """All violations of one property on the focus node. Never short-circuits."""
    values = [o for _, _, o in graph.triples((node, rule.predicate, None))]

    violations = count_violations(rule, node, len(values))
    for term in values:
        violations.extend(value_violations(rule, node, term))

    if rule.has_value is not None and all(str(v) != rule.has_value for v in values):
        violations.append(_violation(
            rule, node, "hasValue",
            f"{rule.name} must include the value '{rule.has_value}' (hasValue)",
        ))
    return violations


def shape_violations(rules, graph, node) -> list[Violation]:
    violations: list[Violation] = []
    for rule in rules:
        violations.extend(property_violations(rule, graph, node))
    return violations


def check_value(rule: PropertyRule, term, node=None) -> None:
    """Raise ConstraintViolation for the first violated constraint of a single value."""
    violations = value_violations(rule, node if node is not None else "", term)
    if violations:
        raise ConstraintViolation(violations[0])
