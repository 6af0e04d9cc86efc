"""
ontogen.runtime.materializer — Turn graph nodes into domain objects.
"""

from __future__ import annotations

from typing import Optional

from rdflib import URIRef
from rdflib.term import Node

from ontogen.errors import NoFactoryError
from ontogen.runtime.handle import RdfHandle
from ontogen.runtime.registry import WrapperRegistry, default_registry


class Materializer:
    def __init__(self, registry: Optional[WrapperRegistry] = None):
        self.registry = registry if registry is not None else default_registry

    def materialize(self, node, graph, iface: type):
        """Wrap node as iface using the registered factory.

        Nested object properties are materialized through this same
        Materializer, so they see the same registry.
        """
        factory = self.registry.factory_for(iface)
        if factory is None:
            raise NoFactoryError(iface)
        if not isinstance(node, Node):
            node = URIRef(node)
        return factory(RdfHandle(node, graph, materializer=self))

    def materialize_validated(self, node, graph, iface: type):
        """Like materialize(), but raise ValidationError if the node violates its shape."""
        obj = self.materialize(node, graph, iface)
        obj.rdf.validate_or_raise()
        return obj
