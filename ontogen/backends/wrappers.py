"""
ontogen.backends.wrappers — Emit graph-backed implementations of the interfaces.

Each wrapper owns an RdfHandle on its focus node. Accessors are
cached_property reads of (focus, predicate, ?): the first read is the
snapshot, later graph changes are not seen. Importing a wrapper module
registers it with the default registry.
"""

from __future__ import annotations

from ontogen.backends.common import (
    HEADER,
    RUNTIME,
    annotation,
    docstring,
    module_path,
    referenced_classes,
    render,
    uses_resource,
    violations_function,
    wrapper_class,
    wrapper_module,
)
from ontogen.model import (
    ArtifactKind,
    ClassBuilderModel,
    GeneratedFile,
    PropertyBuilderModel,
    TypeKind,
)
from ontogen.options import GenerationOptions


class WrapperGenerator:
    name = "wrappers"
    kind = ArtifactKind.WRAPPER

    def generate(
        self,
        classes: list[ClassBuilderModel],
        options: GenerationOptions,
    ) -> list[GeneratedFile]:
        return [
            GeneratedFile(
                path=module_path(options, wrapper_module(cls)),
                content=self.render_class(cls, options),
                kind=self.kind,
                class_name=cls.class_name,
            )
            for cls in classes
        ]

    def render_class(self, cls: ClassBuilderModel, options: GenerationOptions) -> str:
        wrapper = wrapper_class(cls)
        validator = violations_function(cls) if options.validation_enabled else None

        lines = [HEADER]
        if options.include_docs:
            lines += docstring([f"Graph-backed implementation of {cls.class_name}."])
        lines += ["", "from __future__ import annotations", ""]
        lines.append("from functools import cached_property")
        lines.append("from typing import Optional")
        lines.append("")
        lines.append("from rdflib import URIRef")
        if uses_resource(cls):
            lines.append("from rdflib.term import Node")
        lines.append("")
        lines.append(f"from {RUNTIME} import RdfBacked, RdfHandle, WrapperRegistry, default_registry")
        lines.append(f"from .{cls.module_name} import {cls.class_name}")
        for name, module in referenced_classes(cls):
            if name != cls.class_name:
                lines.append(f"from .{module} import {name}")
        if validator:
            lines.append(f"from .validation import {validator}")

        lines += ["", "", f"class {wrapper}({cls.class_name}, RdfBacked):"]
        predicates = cls.known_predicates
        if predicates:
            lines.append("    KNOWN_PREDICATES = frozenset({")
            for iri in predicates:
                lines.append(f"        URIRef({iri!r}),")
            lines.append("    })")
        else:
            lines.append("    KNOWN_PREDICATES = frozenset()")

        lines += [
            "",
            "    def __init__(self, handle: RdfHandle):",
            f"        RdfBacked.__init__(self, handle.bind(self.KNOWN_PREDICATES, {validator}))",
        ]

        for prop in cls.properties:
            lines += ["", "    @cached_property", f"    def {prop.property_name}(self) -> {annotation(prop)}:"]
            lines.append(f"        return {self._read(prop)}")

        lines += [
            "",
            "",
            "def register(registry: WrapperRegistry = default_registry) -> None:",
            f"    registry.register({cls.class_name}, {wrapper})",
            "",
            "",
            "register()",
        ]
        return render(lines)

    def _read(self, prop: PropertyBuilderModel) -> str:
        predicate = f"URIRef({prop.property_iri!r})"
        kind = prop.target_type.kind
        if kind == TypeKind.OBJECT:
            method = "objects" if prop.is_list else "object"
            return f"self.rdf.{method}({predicate}, {prop.target_type.name})"
        if kind == TypeKind.RESOURCE:
            method = "resources" if prop.is_list else "resource"
            return f"self.rdf.{method}({predicate})"
        method = "literals" if prop.is_list else "literal"
        return f"self.rdf.{method}({predicate}, {prop.target_type.name!r})"
