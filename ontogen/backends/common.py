"""
ontogen.backends.common — Naming conventions and text helpers shared by generators.

Every generated module refers to its siblings through the names defined
here, so each generator can be run on its own and still agree with the
others.
"""

from __future__ import annotations

from typing import Iterable, Optional

from ontogen.model import ClassBuilderModel, PropertyBuilderModel, TypeKind
from ontogen.naming import to_pascal_case
from ontogen.options import GenerationOptions

HEADER = "# Generated by ontogen. Do not edit."

RUNTIME = "ontogen.runtime"


# ── Cross-module names ───────────────────────────────────────────


def wrapper_class(cls: ClassBuilderModel) -> str:
    return f"{cls.class_name}Wrapper"


def wrapper_module(cls: ClassBuilderModel) -> str:
    return f"{cls.module_name}_wrapper"


def builder_class(cls: ClassBuilderModel) -> str:
    return f"{cls.class_name}Builder"


def rules_constant(cls: ClassBuilderModel) -> str:
    return f"{cls.module_name.upper()}_RULES"


def violations_function(cls: ClassBuilderModel) -> str:
    return f"{cls.module_name}_violations"


def validate_function(cls: ClassBuilderModel) -> str:
    return f"validate_{cls.module_name}"


def scope_class(options: GenerationOptions) -> str:
    return f"{to_pascal_case(options.dsl_name)}Dsl"


def module_path(options: GenerationOptions, module: str) -> str:
    return f"{options.package_path}/{module}.py"


# ── Types ────────────────────────────────────────────────────────


def value_type(prop: PropertyBuilderModel) -> str:
    """The runtime value-type tag of a property: str, int, float, bool, object or resource."""
    if prop.target_type.kind == TypeKind.LITERAL:
        return prop.target_type.name
    return prop.target_type.kind.value


def element_type(prop: PropertyBuilderModel) -> str:
    return prop.target_type.name


def annotation(prop: PropertyBuilderModel) -> str:
    if prop.is_list:
        return f"list[{element_type(prop)}]"
    return f"Optional[{element_type(prop)}]"


def referenced_classes(cls: ClassBuilderModel) -> list[tuple[str, str]]:
    """(class name, module) of every generated class the properties point at."""
    seen: list[tuple[str, str]] = []
    for prop in cls.properties:
        t = prop.target_type
        if t.kind == TypeKind.OBJECT and (t.name, t.module) not in seen:
            seen.append((t.name, t.module))
    return seen


def uses_resource(cls: ClassBuilderModel, properties: Optional[Iterable[PropertyBuilderModel]] = None) -> bool:
    props = cls.properties if properties is None else properties
    return any(p.target_type.kind == TypeKind.RESOURCE for p in props)


def count_summary(prop: PropertyBuilderModel) -> str:
    c = prop.constraints
    max_count = "unbounded" if c.max_count is None else str(c.max_count)
    return f"minCount={c.min_count}, maxCount={max_count}"


# ── Text ─────────────────────────────────────────────────────────


def docstring(lines: list[str], indent: str = "") -> list[str]:
    """Format lines as a docstring block. Empty lines become paragraph breaks."""
    cleaned = [_escape(line) for line in lines]
    while cleaned and not cleaned[-1]:
        cleaned.pop()
    if not cleaned:
        return []
    if len(cleaned) == 1:
        return [f'{indent}"""{cleaned[0]}"""']
    out = [f'{indent}"""{cleaned[0]}']
    for line in cleaned[1:]:
        out.append(f"{indent}{line}" if line else "")
    out.append(f'{indent}"""')
    return out


def _escape(text: str) -> str:
    text = " ".join(text.split())
    return text.replace("\\", "\\\\").replace('"""', '\\"\\"\\"')


def py_literal(value) -> str:
    """Python source for a constant: str, int, float, bool, None or tuple of str."""
    if isinstance(value, tuple):
        if len(value) == 1:
            return f"({value[0]!r},)"
        return "(" + ", ".join(repr(v) for v in value) + ")"
    return repr(value)


def render(lines: list[str]) -> str:
    """Join lines into module text ending with exactly one newline."""
    text = "\n".join(lines).rstrip("\n")
    return text + "\n"
