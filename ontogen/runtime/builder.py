"""
ontogen.runtime.builder — Base classes of the generated instance DSL.

An InstanceScope owns the graph being built and the list of built focus
nodes. Generated builders subclass InstanceBuilder and add one setter per
property; setters check values immediately, validate() checks the whole
node, build() hands the triples to the scope.
"""

from __future__ import annotations

from typing import ClassVar, Optional

from rdflib import BNode, Graph, RDF, URIRef
from rdflib.term import Node

from ontogen.runtime.constraints import PropertyRule, check_value
from ontogen.runtime.handle import as_node
from ontogen.runtime.literals import to_literal


class InstanceScope:
    def __init__(self, graph: Optional[Graph] = None):
        self.graph = graph if graph is not None else Graph()
        self.instances: list[Node] = []

    def add(self, node: Node, triples) -> None:
        for triple in triples:
            self.graph.add(triple)
        if node not in self.instances:
            self.instances.append(node)

    def result(self) -> tuple[Graph, list[Node]]:
        return self.graph, list(self.instances)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        return False


class InstanceBuilder:
    CLASS_IRI: ClassVar[str] = ""

    def __init__(self, scope: Optional[InstanceScope] = None, iri=None):
        self.scope = scope
        self.node: Node = as_node(iri) if iri is not None else BNode()
        self._values: dict[URIRef, list[Node]] = {}

    # ── Setters used by generated code ───────────────────────────

    def _check(self, rule: PropertyRule, term: Node) -> Node:
        check_value(rule, term, self.node)
        return term

    def _set(self, rule: PropertyRule, term: Node) -> None:
        self._values[rule.predicate] = [self._check(rule, term)]

    def _add(self, rule: PropertyRule, term: Node) -> None:
        self._values.setdefault(rule.predicate, []).append(self._check(rule, term))

    def _set_literal(self, rule: PropertyRule, value, datatype=None, lang=None):
        self._set(rule, to_literal(value, datatype, lang))
        return self

    def _add_literal(self, rule: PropertyRule, value, datatype=None, lang=None):
        self._add(rule, to_literal(value, datatype, lang))
        return self

    def _set_object(self, rule: PropertyRule, value):
        self._set(rule, as_node(value))
        return self

    def _add_object(self, rule: PropertyRule, value):
        self._add(rule, as_node(value))
        return self

    # ── Output ───────────────────────────────────────────────────

    @property
    def triples(self) -> list[tuple[Node, Node, Node]]:
        result = []
        if self.CLASS_IRI:
            result.append((self.node, RDF.type, URIRef(self.CLASS_IRI)))
        for predicate, values in self._values.items():
            for value in values:
                result.append((self.node, predicate, value))
        return result

    def to_graph(self) -> Graph:
        """The builder's triples, merged over the scope graph when there is one."""
        g = Graph()
        if self.scope is not None:
            for triple in self.scope.graph:
                g.add(triple)
        for triple in self.triples:
            g.add(triple)
        return g

    def build(self) -> Node:
        if self.scope is None:
            self.scope = InstanceScope()
        self.scope.add(self.node, self.triples)
        return self.node

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.node}>"
