"""
ontogen.naming — Derive Python identifiers from IRIs and SHACL names.

Convention-based: the local name (fragment after
'#' or last path segment) of an IRI is the starting point. Class names are
PascalCase, properties and modules snake_case.
"""

from __future__ import annotations

import keyword
import re
import warnings
from typing import Callable, Optional

# Members every generated class already defines.
RESERVED_MEMBERS = frozenset({
    "rdf",
    "node",
    "build",
    "validate",
    "CLASS_IRI",
    "PREDICATES",
    "KNOWN_PREDICATES",
    "scope",
    "triples",
    "to_graph",
    "predicate_for",
})

_WORD_SPLIT = re.compile(r"[^0-9A-Za-z]+")
_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")


def local_name(iri: str) -> str:
    if "#" in iri:
        return iri.rsplit("#", 1)[1]
    tail = iri.rstrip("/").rsplit("/", 1)[-1]
    if ":" in tail:
        return tail.rsplit(":", 1)[1]
    return tail


def _words(name: str) -> list[str]:
    words: list[str] = []
    for chunk in _WORD_SPLIT.split(name):
        if chunk:
            words.extend(w for w in _CAMEL_BOUNDARY.split(chunk) if w)
    return words


def to_pascal_case(name: str) -> str:
    result = "".join(w[0].upper() + w[1:] for w in _words(name))
    if not result:
        return "Thing"
    if result[0].isdigit():
        result = "_" + result
    return result


def to_snake_case(name: str) -> str:
    result = "_".join(w.lower() for w in _words(name))
    if not result:
        return "value"
    if result[0].isdigit():
        result = "_" + result
    return result


def class_name_for(iri: str) -> str:
    return to_pascal_case(local_name(iri))


def property_name_for(name: str) -> str:
    ident = to_snake_case(name)
    if keyword.iskeyword(ident) or ident in RESERVED_MEMBERS:
        ident += "_"
    return ident


def module_name_for(class_name: str) -> str:
    ident = to_snake_case(class_name)
    if keyword.iskeyword(ident):
        ident += "_"
    return ident


class NameAllocator:
    """Hands out unique identifiers within one scope.

    The first claimant keeps the plain name; later ones get a numeric
    suffix and a warning.
    """

    def __init__(self, scope: str, taken: frozenset[str] = frozenset()):
        self.scope = scope
        self._taken: set[str] = set(taken)

    def reserve(self, name: str) -> None:
        self._taken.add(name)

    def free(self, *names: str) -> bool:
        return not any(n in self._taken for n in names)

    def claim(self, name: str, origin: str, accept: Optional[Callable[[str], bool]] = None) -> str:
        """Claim name, or the first suffixed variant that is free.

        accept, when given, must also hold for the claimed name; it lets
        callers require that names derived from it are free too.
        """
        def ok(candidate: str) -> bool:
            return self.free(candidate) and (accept is None or accept(candidate))

        if ok(name):
            self._taken.add(name)
            return name
        n = 2
        while not ok(f"{name}_{n}"):
            n += 1
        unique = f"{name}_{n}"
        warnings.warn(
            f"Identifier '{name}' already used in {self.scope}; "
            f"{origin} renamed to '{unique}'."
        )
        self._taken.add(unique)
        return unique
