"""
ontogen.runtime — Library imported by generated code.
"""

from ontogen.errors import (
    ConstraintViolation,
    MaterializationError,
    NoFactoryError,
    ValidationError,
)
from ontogen.runtime.builder import InstanceBuilder, InstanceScope
from ontogen.runtime.constraints import (
    PropertyRule,
    Violation,
    check_value,
    property_violations,
    shape_violations,
    value_violations,
)
from ontogen.runtime.handle import (
    OntologyInterface,
    PropertyBag,
    RdfBacked,
    RdfHandle,
    as_node,
    as_rdf,
)
from ontogen.runtime.literals import LangString, from_literal, to_literal
from ontogen.runtime.materializer import Materializer
from ontogen.runtime.registry import WrapperRegistry, default_registry

__all__ = [
    "ConstraintViolation",
    "InstanceBuilder",
    "InstanceScope",
    "LangString",
    "MaterializationError",
    "Materializer",
    "NoFactoryError",
    "OntologyInterface",
    "PropertyBag",
    "PropertyRule",
    "RdfBacked",
    "RdfHandle",
    "ValidationError",
    "Violation",
    "WrapperRegistry",
    "as_node",
    "as_rdf",
    "check_value",
    "default_registry",
    "from_literal",
    "property_violations",
    "shape_violations",
    "to_literal",
    "value_violations",
]
