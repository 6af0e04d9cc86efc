"""
ontogen.type_mapper — Datatype and cardinality resolution.

Pure functions: given a ShaclProperty (plus the JSON-LD context and the set
of generated classes), decide the Python type of its accessor and whether
the accessor is a list.
"""

from __future__ import annotations

from typing import Optional

from ontogen.model import (
    JsonLdContext,
    JsonLdProperty,
    ResolvedType,
    ShaclProperty,
    TypeKind,
)

# ─── XSD type mapping ────────────────────────────────────────────────

XSD = "http://www.w3.org/2001/XMLSchema#"

XSD_TO_PYTHON_TYPE = {
    f"{XSD}string": "str",
    f"{XSD}anyURI": "str",
    f"{XSD}int": "int",
    f"{XSD}integer": "int",
    f"{XSD}double": "float",
    f"{XSD}float": "float",
    f"{XSD}boolean": "bool",
}

# Unrecognized datatypes keep their lexical form.
FALLBACK_TYPE = "str"

# Python-side name for references to resources with no generated class.
RESOURCE_TYPE = "Node"


def map_datatype(datatype: Optional[str]) -> str:
    if datatype is None:
        return FALLBACK_TYPE
    return XSD_TO_PYTHON_TYPE.get(datatype, FALLBACK_TYPE)


def resolve_type(
    prop: ShaclProperty,
    context: JsonLdContext,
    known_classes: dict[str, tuple[str, str]],
) -> ResolvedType:
    """Resolve the accessor type of a property.

    known_classes maps class IRI -> (class name, module name) for every
    class that will be generated.
    """
    term = context.term_for(prop.path)
    ctx_prop: Optional[JsonLdProperty] = term[1] if term else None

    if prop.target_class is not None or (ctx_prop is not None and ctx_prop.is_reference):
        target = known_classes.get(prop.target_class) if prop.target_class else None
        if target is None:
            return ResolvedType(kind=TypeKind.RESOURCE, name=RESOURCE_TYPE)
        class_name, module = target
        return ResolvedType(kind=TypeKind.OBJECT, name=class_name, module=module)

    datatype = prop.datatype
    if datatype is None and ctx_prop is not None and ctx_prop.type is not None:
        datatype = ctx_prop.type
    return ResolvedType(kind=TypeKind.LITERAL, name=map_datatype(datatype), datatype=datatype)


# ─── Cardinality ─────────────────────────────────────────────────────


def is_list(max_count: Optional[int]) -> bool:
    """Unbounded or >1 is a list; exactly 1 is a scalar."""
    return max_count is None or max_count > 1


def is_required(min_count: int) -> bool:
    return min_count >= 1


def resolve_cardinality(prop: ShaclProperty) -> tuple[bool, bool]:
    """Return (is_required, is_list)."""
    return is_required(prop.min_count), is_list(prop.max_count)
