"""
ontogen.backends.interfaces — Emit one abstract interface per generated class.

Interfaces carry no RDF logic: only typed abstract accessors, the class
IRI and the accessor -> predicate map.
"""

from __future__ import annotations

from ontogen.backends.common import (
    HEADER,
    RUNTIME,
    annotation,
    count_summary,
    docstring,
    module_path,
    referenced_classes,
    render,
    uses_resource,
)
from ontogen.model import ArtifactKind, ClassBuilderModel, GeneratedFile
from ontogen.options import GenerationOptions


class InterfaceGenerator:
    name = "interfaces"
    kind = ArtifactKind.INTERFACE

    def generate(
        self,
        classes: list[ClassBuilderModel],
        options: GenerationOptions,
    ) -> list[GeneratedFile]:
        modules = {cls.class_name: cls.module_name for cls in classes}
        return [
            GeneratedFile(
                path=module_path(options, cls.module_name),
                content=self.render_class(cls, options, modules),
                kind=self.kind,
                class_name=cls.class_name,
            )
            for cls in classes
        ]

    def render_class(
        self,
        cls: ClassBuilderModel,
        options: GenerationOptions,
        modules: dict[str, str],
    ) -> str:
        supers = [s for s in cls.super_classes if s in modules]
        props = cls.own_properties if supers else cls.properties

        lines = [HEADER]
        if options.include_docs:
            lines += docstring([f"{cls.class_name} interface.", "", f"Class IRI: {cls.class_iri}"])
        lines += ["", "from __future__ import annotations", ""]

        lines.append("from abc import abstractmethod")
        lines.append("from typing import ClassVar, Optional, TYPE_CHECKING")
        lines.append("")
        if uses_resource(cls, props):
            lines.append("from rdflib.term import Node")
            lines.append("")
        if supers:
            for name in supers:
                lines.append(f"from .{modules[name]} import {name}")
        else:
            lines.append(f"from {RUNTIME} import OntologyInterface")

        lazy = [
            (name, module) for name, module in referenced_classes(cls)
            if name != cls.class_name and name not in supers
        ]
        if lazy:
            lines += ["", "if TYPE_CHECKING:"]
            for name, module in lazy:
                lines.append(f"    from .{module} import {name}")

        bases = ", ".join(supers) if supers else "OntologyInterface"
        lines += ["", "", f"class {cls.class_name}({bases}):"]
        if options.include_docs and cls.description:
            lines += docstring([cls.description], indent="    ")
            lines.append("")
        lines.append(f"    CLASS_IRI: ClassVar[str] = {cls.class_iri!r}")
        if props:
            lines.append("    PREDICATES: ClassVar[dict[str, str]] = {")
            for prop in props:
                lines.append(f"        {prop.property_name!r}: {prop.property_iri!r},")
            lines.append("    }")
        else:
            lines.append("    PREDICATES: ClassVar[dict[str, str]] = {}")

        for prop in props:
            lines += [
                "",
                "    @property",
                "    @abstractmethod",
                f"    def {prop.property_name}(self) -> {annotation(prop)}:",
            ]
            doc = []
            if options.include_docs:
                if prop.description:
                    doc += [prop.description, ""]
                doc.append(f"Predicate: {prop.property_iri} ({count_summary(prop)})")
            body = docstring(doc, indent="        ")
            lines += body if body else ["        ..."]

        return render(lines)
