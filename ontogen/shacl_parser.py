"""
ontogen.shacl_parser — Parse SHACL/Turtle documents into ShaclShape objects.

Takes a SHACL schema in Turtle (or any rdflib-supported syntax), parses it
via rdflib, then walks the graph to produce one ShaclShape per
(sh:NodeShape, sh:targetClass) pair.
"""

from __future__ import annotations

import logging
import warnings
from typing import Optional, Union

from rdflib import Graph, URIRef, Literal as RDFLiteral, RDF, RDFS, BNode
from rdflib.collection import Collection
from rdflib.namespace import OWL, SH

from ontogen.errors import ShaclParseError
from ontogen.model import ShaclShape, ShaclProperty, OntologyClass
from ontogen.naming import local_name, class_name_for

logger = logging.getLogger(__name__)


def load_shacl_graph(
    shacl: Union[str, Graph],
    source: str = "<string>",
    format: str = "turtle",
) -> Graph:
    """Return an rdflib Graph for SHACL text, or the graph itself if already parsed."""
    if isinstance(shacl, Graph):
        return shacl

    g = Graph()
    try:
        g.parse(data=shacl, format=format)
    except Exception as e:
        raise ShaclParseError(f"{type(e).__name__}: {e}", source=source) from e
    logger.info("Parsed %s: %d triples", source, len(g))
    return g


def parse_shacl(
    shacl: Union[str, Graph],
    source: str = "<string>",
    format: str = "turtle",
) -> list[ShaclShape]:
    """Parse a SHACL document (text or graph) into a list of ShaclShape."""
    g = load_shacl_graph(shacl, source=source, format=format)
    return shapes_from_graph(g, source=source)


def shapes_from_graph(g: Graph, source: str = "<string>") -> list[ShaclShape]:
    shapes: list[ShaclShape] = []

    node_shapes = list(dict.fromkeys(g.subjects(RDF.type, SH.NodeShape)))
    logger.info("Found %d NodeShapes in %s", len(node_shapes), source)

    for shape_node in node_shapes:
        shape_iri = str(shape_node)

        target_classes = [t for t in g.objects(shape_node, SH.targetClass) if isinstance(t, URIRef)]
        if not target_classes:
            warnings.warn(f"NodeShape {shape_iri} has no sh:targetClass, skipping.")
            continue

        # Process each sh:property block
        properties: list[ShaclProperty] = []
        for prop_node in g.objects(shape_node, SH.property):
            prop = _parse_property_shape(g, prop_node, shape_iri)
            if prop is not None:
                properties.append(prop)
        properties = _apply_order(properties)

        for target_class in target_classes:
            shapes.append(ShaclShape(
                shape_iri=shape_iri,
                target_class=str(target_class),
                properties=list(properties),
            ))
            logger.debug(
                "Extracted shape %s -> %s with %d properties",
                shape_iri, target_class, len(properties),
            )

    return shapes


def extract_classes(g: Graph, shapes: list[ShaclShape]) -> list[OntologyClass]:
    """Collect the classes the document knows about, with rdfs:subClassOf parents.

    Shape targets come first, in shape order. Classes that are only
    declared (rdfs:Class, owl:Class) or only referenced (sh:class,
    rdfs:subClassOf) follow; they have no shape and are skipped at
    generation time.
    """
    iris: list[str] = []
    for shape in shapes:
        iris.append(shape.target_class)
    for class_type in (RDFS.Class, OWL.Class):
        iris.extend(str(c) for c in g.subjects(RDF.type, class_type) if isinstance(c, URIRef))
    iris.extend(str(c) for c in g.objects(None, SH["class"]) if isinstance(c, URIRef))
    for sub, sup in g.subject_objects(RDFS.subClassOf):
        if isinstance(sub, URIRef) and isinstance(sup, URIRef):
            iris.extend([str(sub), str(sup)])

    classes: list[OntologyClass] = []
    for iri in dict.fromkeys(iris):
        supers = tuple(
            str(sup) for sup in g.objects(URIRef(iri), RDFS.subClassOf)
            if isinstance(sup, URIRef)
        )
        classes.append(OntologyClass(class_iri=iri, class_name=class_name_for(iri), super_classes=supers))
    return classes


# ── Property shape processing ────────────────────────────────────


def _parse_property_shape(g: Graph, prop_node, shape_iri: str) -> Optional[ShaclProperty]:
    """Turn one sh:property node into a ShaclProperty, or None if unusable."""

    path = g.value(prop_node, SH.path)
    if path is None:
        warnings.warn(f"Property shape in {shape_iri} has no sh:path, skipping.")
        return None

    if isinstance(path, BNode) or not isinstance(path, URIRef):
        warnings.warn(
            f"Complex sh:path in shape {shape_iri} is not supported, skipping."
        )
        return None

    predicate_iri = str(path)

    sh_name = g.value(prop_node, SH.name)
    sh_description = g.value(prop_node, SH.description)
    sh_datatype = g.value(prop_node, SH.datatype)
    sh_class = g.value(prop_node, SH["class"])

    min_count = _integer(g, prop_node, SH.minCount, shape_iri)
    max_count = _integer(g, prop_node, SH.maxCount, shape_iri)

    sh_in = g.value(prop_node, SH["in"])
    sh_has_value = g.value(prop_node, SH.hasValue)
    sh_node_kind = g.value(prop_node, SH.nodeKind)
    sh_pattern = g.value(prop_node, SH.pattern)
    sh_flags = g.value(prop_node, SH.flags)

    return ShaclProperty(
        path=predicate_iri,
        name=str(sh_name) if sh_name is not None else local_name(predicate_iri),
        description=str(sh_description) if sh_description is not None else "",
        datatype=str(sh_datatype) if sh_datatype is not None else None,
        target_class=str(sh_class) if sh_class is not None else None,
        min_count=min_count if min_count is not None else 0,
        max_count=max_count,
        min_length=_integer(g, prop_node, SH.minLength, shape_iri),
        max_length=_integer(g, prop_node, SH.maxLength, shape_iri),
        pattern=str(sh_pattern) if sh_pattern is not None else None,
        flags=str(sh_flags) if sh_flags is not None else None,
        in_values=_extract_rdf_list(g, sh_in) if sh_in is not None else None,
        min_inclusive=_number(g, prop_node, SH.minInclusive, shape_iri),
        max_inclusive=_number(g, prop_node, SH.maxInclusive, shape_iri),
        min_exclusive=_number(g, prop_node, SH.minExclusive, shape_iri),
        max_exclusive=_number(g, prop_node, SH.maxExclusive, shape_iri),
        has_value=str(sh_has_value) if sh_has_value is not None else None,
        node_kind=str(sh_node_kind) if sh_node_kind is not None else None,
        order=_number(g, prop_node, SH.order, shape_iri),
    )


def _apply_order(properties: list[ShaclProperty]) -> list[ShaclProperty]:
    """Stable sort by sh:order; unordered properties keep document order after ordered ones."""
    if not any(p.order is not None for p in properties):
        return properties
    return sorted(properties, key=lambda p: (p.order is None, p.order or 0.0))


# ── Helpers ──────────────────────────────────────────────────────


def _integer(g: Graph, node, predicate, shape_iri: str) -> Optional[int]:
    lit = g.value(node, predicate)
    if lit is None:
        return None
    try:
        return int(lit.toPython()) if isinstance(lit, RDFLiteral) else int(lit)
    except (TypeError, ValueError) as e:
        raise ShaclParseError(
            f"{local_name(str(predicate))} in {shape_iri} must be an integer, got '{lit}'"
        ) from e


def _number(g: Graph, node, predicate, shape_iri: str) -> Optional[float]:
    lit = g.value(node, predicate)
    if lit is None:
        return None
    try:
        return float(lit.toPython()) if isinstance(lit, RDFLiteral) else float(lit)
    except (TypeError, ValueError) as e:
        raise ShaclParseError(
            f"{local_name(str(predicate))} in {shape_iri} must be numeric, got '{lit}'"
        ) from e


def _extract_rdf_list(g: Graph, list_node) -> list[str]:
    """Extract the lexical forms of an RDF list (for sh:in)."""
    return [str(item) for item in Collection(g, list_node)]
