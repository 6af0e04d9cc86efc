"""
ontogen.runtime.handle — Graph handles behind generated wrappers.

An RdfHandle is the focus node plus the graph it lives in. Generated
wrappers read their accessors through it, and expose it as ``.rdf`` so
callers can reach triples no accessor is bound to (the ``extras`` bag).
"""

from __future__ import annotations

from abc import ABC
from functools import cached_property
from typing import Any, Callable, ClassVar, Iterable, Optional, TYPE_CHECKING

from rdflib import BNode, Literal, URIRef
from rdflib.term import Node

from ontogen.errors import ValidationError
from ontogen.runtime.literals import from_literal

if TYPE_CHECKING:
    from ontogen.runtime.constraints import Violation
    from ontogen.runtime.materializer import Materializer

Validator = Callable[[Node, Any], "list[Violation]"]


def as_node(value) -> Node:
    """Coerce an IRI string, wrapper, builder or term into a graph node."""
    if isinstance(value, Node):
        return value
    if isinstance(value, RdfBacked):
        return value.rdf.node
    node = getattr(value, "node", None)
    if isinstance(node, Node):
        return node
    if isinstance(value, str):
        return URIRef(value)
    raise TypeError(f"Cannot use {type(value).__name__} as an RDF node")


class PropertyBag:
    """Triples on the focus node whose predicate is not bound to an accessor.

    Computed once, on first access.
    """

    def __init__(self, handle: RdfHandle, exclude: Iterable[URIRef]):
        self._handle = handle
        self._exclude = frozenset(URIRef(p) for p in exclude)

    @cached_property
    def _by_predicate(self) -> dict[URIRef, list[Node]]:
        grouped: dict[URIRef, list[Node]] = {}
        for _, p, o in self._handle.graph.triples((self._handle.node, None, None)):
            if p in self._exclude:
                continue
            grouped.setdefault(p, []).append(o)
        return grouped

    def predicates(self) -> list[URIRef]:
        return sorted(self._by_predicate, key=str)

    def values(self, predicate) -> list[Node]:
        return list(self._by_predicate.get(URIRef(predicate), []))

    def literals(self, predicate) -> list[Literal]:
        return [v for v in self.values(predicate) if isinstance(v, Literal)]

    def strings(self, predicate) -> list[str]:
        return [str(v) for v in self.literals(predicate)]

    def iris(self, predicate) -> list[URIRef]:
        return [v for v in self.values(predicate) if isinstance(v, URIRef)]

    def objects(self, predicate, iface: type) -> list:
        return [
            self._handle.materialize(v, iface)
            for v in self.values(predicate)
            if isinstance(v, (URIRef, BNode))
        ]

    def __contains__(self, predicate) -> bool:
        return URIRef(predicate) in self._by_predicate

    def __len__(self) -> int:
        return len(self._by_predicate)


class RdfHandle:
    def __init__(
        self,
        node: Node,
        graph,
        known: Iterable[str] = (),
        materializer: Optional[Materializer] = None,
        validator: Optional[Validator] = None,
    ):
        self.node = node
        self.graph = graph
        self.known = frozenset(URIRef(p) for p in known)
        self._materializer = materializer
        self._validator = validator

    def bind(self, known: Iterable[str], validator: Optional[Validator] = None) -> RdfHandle:
        """A handle on the same node that knows the wrapper's predicates."""
        return RdfHandle(self.node, self.graph, known, self._materializer, validator)

    @property
    def materializer(self) -> Materializer:
        if self._materializer is None:
            from ontogen.runtime.materializer import Materializer
            self._materializer = Materializer()
        return self._materializer

    # ── Reads ────────────────────────────────────────────────────

    def values(self, predicate) -> list[Node]:
        """Objects of (node, predicate, ?) in graph enumeration order."""
        return [o for _, _, o in self.graph.triples((self.node, URIRef(predicate), None))]

    def literals(self, predicate, value_type: str) -> list:
        result = []
        for term in self.values(predicate):
            value = from_literal(term, value_type)
            if value is not None:
                result.append(value)
        return result

    def literal(self, predicate, value_type: str):
        values = self.literals(predicate, value_type)
        return values[0] if values else None

    def resources(self, predicate) -> list[Node]:
        return [v for v in self.values(predicate) if isinstance(v, (URIRef, BNode))]

    def resource(self, predicate) -> Optional[Node]:
        values = self.resources(predicate)
        return values[0] if values else None

    def objects(self, predicate, iface: type) -> list:
        return [self.materialize(v, iface) for v in self.resources(predicate)]

    def object(self, predicate, iface: type):
        node = self.resource(predicate)
        return self.materialize(node, iface) if node is not None else None

    def materialize(self, node: Node, iface: type):
        return self.materializer.materialize(node, self.graph, iface)

    # ── Side-channel ─────────────────────────────────────────────

    @cached_property
    def extras(self) -> PropertyBag:
        return PropertyBag(self, self.known)

    # ── Validation ───────────────────────────────────────────────

    def validate(self) -> list[Violation]:
        if self._validator is None:
            return []
        return self._validator(self.node, self.graph)

    def validate_or_raise(self) -> None:
        violations = self.validate()
        if violations:
            raise ValidationError(f"{self.node} validation failed", violations)

    def __repr__(self) -> str:
        return f"RdfHandle({self.node!r})"


class RdfBacked:
    """Base of generated wrappers: a domain object backed by a graph node."""

    def __init__(self, handle: RdfHandle):
        self._rdf = handle

    @property
    def rdf(self) -> RdfHandle:
        return self._rdf

    def __eq__(self, other) -> bool:
        if not isinstance(other, RdfBacked):
            return NotImplemented
        return type(self) is type(other) and self._rdf.node == other._rdf.node

    def __hash__(self) -> int:
        return hash((type(self), self._rdf.node))

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self._rdf.node}>"


class OntologyInterface(ABC):
    """Base of generated interfaces."""

    CLASS_IRI: ClassVar[str] = ""
    # accessor name -> predicate IRI
    PREDICATES: ClassVar[dict[str, str]] = {}

    @classmethod
    def predicate_for(cls, accessor: str) -> str:
        for klass in cls.__mro__:
            predicates = klass.__dict__.get("PREDICATES")
            if predicates and accessor in predicates:
                return predicates[accessor]
        raise KeyError(f"{cls.__name__} has no accessor '{accessor}'")


def as_rdf(obj) -> RdfHandle:
    """The RDF side-channel of a materialized object."""
    if isinstance(obj, RdfBacked):
        return obj.rdf
    raise TypeError(f"Object is not RDF-backed: {type(obj).__name__}")
