"""
ontogen.ontology — Build the OntologyModel and resolve it for generation.

Two phases: every class that has a shape is named first, then each class's
properties are resolved. Object properties can therefore point at any
generated class regardless of document order.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Optional, Union

from rdflib import Graph

from ontogen.context_parser import parse_context
from ontogen.model import (
    ClassBuilderModel,
    JsonLdContext,
    OntologyClass,
    OntologyModel,
    PropertyBuilderModel,
    PropertyConstraints,
    ShaclShape,
)
from ontogen.naming import (
    NameAllocator,
    class_name_for,
    module_name_for,
    property_name_for,
)
from ontogen.shacl_parser import extract_classes, load_shacl_graph, shapes_from_graph
from ontogen.type_mapper import resolve_cardinality, resolve_type

logger = logging.getLogger(__name__)

# Module names used by the generated package itself.
RESERVED_MODULES = frozenset({"dsl", "validation"})

# Attributes of the generated instance scope.
RESERVED_BUILDER_NAMES = frozenset({"graph", "instances", "add", "result"})

# Names imported at module level by generated code.
RESERVED_CLASS_NAMES = frozenset({
    "Callable",
    "ClassVar",
    "Graph",
    "InstanceBuilder",
    "InstanceScope",
    "Node",
    "OntologyInterface",
    "Optional",
    "PropertyRule",
    "RdfBacked",
    "RdfHandle",
    "URIRef",
    "ValidationError",
    "Violation",
    "WrapperRegistry",
})


def build_model(
    shapes: list[ShaclShape],
    context: Optional[JsonLdContext] = None,
    classes: Optional[list[OntologyClass]] = None,
    source: str = "<string>",
) -> OntologyModel:
    if context is None:
        context = JsonLdContext()
    if classes is None:
        classes = []
        for shape in shapes:
            if all(c.class_iri != shape.target_class for c in classes):
                classes.append(OntologyClass(shape.target_class, class_name_for(shape.target_class)))
    return OntologyModel(
        shapes=tuple(shapes),
        context=context,
        classes=tuple(classes),
        source=source,
    )


def parse_ontology(
    shacl: Union[str, Graph],
    context: Union[str, dict, None] = None,
    source: str = "<string>",
    format: str = "turtle",
) -> OntologyModel:
    """Parse SHACL (and an optional JSON-LD context) into an OntologyModel."""
    g = load_shacl_graph(shacl, source=source, format=format)
    shapes = shapes_from_graph(g, source=source)
    classes = extract_classes(g, shapes)
    ctx = parse_context(context, source=f"{source} (context)") if context is not None else None
    return build_model(shapes, context=ctx, classes=classes, source=source)


class OntologyModelBuilder:
    """Resolve an OntologyModel into ClassBuilderModel objects."""

    def __init__(self, model: OntologyModel):
        self.model = model
        self._names: dict[str, tuple[str, str]] = {}  # class IRI -> (class name, module)
        self._builder_names: dict[str, str] = {}
        self._resolved: dict[str, ClassBuilderModel] = {}
        self._resolving: set[str] = set()

    def build(self) -> list[ClassBuilderModel]:
        self._collect_classes()
        result = [self._resolve(cls) for cls in self._matched_classes()]
        logger.info(
            "Resolved %d classes (%d skipped without shapes)",
            len(result), len(self.model.classes) - len(result),
        )
        return result

    def skipped_classes(self) -> list[str]:
        """Class IRIs known to the model that no shape targets."""
        return [c.class_iri for c in self.model.classes if self.model.shape_for(c.class_iri) is None]

    # ── Phase 1: naming ──────────────────────────────────────────

    def _matched_classes(self) -> list[OntologyClass]:
        return [c for c in self.model.classes if self.model.shape_for(c.class_iri) is not None]

    def _collect_classes(self) -> None:
        class_names = NameAllocator("generated classes", taken=RESERVED_CLASS_NAMES)
        modules = NameAllocator("generated modules", taken=RESERVED_MODULES)
        builders = NameAllocator("instance DSL", taken=RESERVED_BUILDER_NAMES)

        # A class name is usable only if its wrapper, builder and both modules are free too
        def usable(name: str) -> bool:
            module = module_name_for(name)
            return (
                class_names.free(f"{name}Wrapper", f"{name}Builder")
                and modules.free(module, f"{module}_wrapper")
            )

        for cls in self._matched_classes():
            name = class_names.claim(cls.class_name, origin=cls.class_iri, accept=usable)
            class_names.reserve(f"{name}Wrapper")
            class_names.reserve(f"{name}Builder")
            module = modules.claim(module_name_for(name), origin=cls.class_iri)
            modules.reserve(f"{module}_wrapper")
            self._names[cls.class_iri] = (name, module)
            self._builder_names[cls.class_iri] = builders.claim(property_name_for(name), origin=cls.class_iri)

    # ── Phase 2: properties ──────────────────────────────────────

    def _class(self, iri: str) -> Optional[OntologyClass]:
        for cls in self.model.classes:
            if cls.class_iri == iri:
                return cls
        return None

    def _resolve(self, cls: OntologyClass) -> ClassBuilderModel:
        if cls.class_iri in self._resolved:
            return self._resolved[cls.class_iri]
        self._resolving.add(cls.class_iri)

        class_name, module = self._names[cls.class_iri]

        # Inherited properties, nearest super class first
        supers: list[str] = []
        inherited: list[PropertyBuilderModel] = []
        for super_iri in cls.super_classes:
            if super_iri not in self._names or super_iri in self._resolving:
                continue
            super_cls = self._class(super_iri)
            if super_cls is None:
                continue
            super_model = self._resolve(super_cls)
            supers.append(super_model.class_name)
            for prop in super_model.properties:
                if all(p.property_iri != prop.property_iri for p in inherited):
                    inherited.append(replace(prop, inherited=True))

        shapes = [s for s in self.model.shapes if s.target_class == cls.class_iri]
        allocator = NameAllocator(f"class {class_name}", taken=frozenset(p.property_name for p in inherited))
        own: list[PropertyBuilderModel] = []

        for shape in shapes:
            for prop in shape.properties:
                if any(p.property_iri == prop.path for p in own):
                    continue
                overridden = next((p for p in inherited if p.property_iri == prop.path), None)
                if overridden is not None:
                    inherited.remove(overridden)
                    name = overridden.property_name
                else:
                    name = allocator.claim(self._property_name(prop.name, prop.path), origin=prop.path)

                required, as_list = resolve_cardinality(prop)
                own.append(PropertyBuilderModel(
                    property_name=name,
                    property_iri=prop.path,
                    target_type=resolve_type(prop, self.model.context, self._names),
                    is_required=required,
                    is_list=as_list,
                    constraints=PropertyConstraints.from_property(prop),
                    description=prop.description,
                ))

        resolved = ClassBuilderModel(
            class_name=class_name,
            class_iri=cls.class_iri,
            builder_name=self._builder_names[cls.class_iri],
            module_name=module,
            properties=own + inherited,
            shape_iri=shapes[0].shape_iri if shapes else None,
            super_classes=supers,
        )
        self._resolving.discard(cls.class_iri)
        self._resolved[cls.class_iri] = resolved
        return resolved

    def _property_name(self, shacl_name: str, path: str) -> str:
        # A context term whose @id is the path wins over sh:name
        term = self.model.context.term_for(path)
        if term is not None:
            return property_name_for(term[0])
        return property_name_for(shacl_name)


def resolve_classes(model: OntologyModel) -> list[ClassBuilderModel]:
    return OntologyModelBuilder(model).build()
