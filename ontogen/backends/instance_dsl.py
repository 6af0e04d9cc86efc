"""
ontogen.backends.instance_dsl — Emit the instance DSL module.

One builder class per generated class, one scope class with a factory
method per builder, and an entry function named after options.dsl_name:

    graph, instances = movies(lambda dsl: dsl.person("http://ex/p1").name("Ann").build())
"""

from __future__ import annotations

from ontogen.backends.common import (
    HEADER,
    RUNTIME,
    builder_class,
    count_summary,
    docstring,
    module_path,
    render,
    rules_constant,
    scope_class,
    validate_function,
    wrapper_class,
    wrapper_module,
)
from ontogen.errors import GenerationError
from ontogen.model import (
    ArtifactKind,
    ClassBuilderModel,
    GeneratedFile,
    PropertyBuilderModel,
    TypeKind,
)
from ontogen.options import GenerationOptions

# Module-level names of the generated dsl and __init__ modules besides the generated classes
_IMPORTED = frozenset({
    "annotations",
    "register",
    "Callable",
    "Optional",
    "Graph",
    "Node",
    "InstanceBuilder",
    "InstanceScope",
    "RdfBacked",
})


class InstanceDslGenerator:
    name = "instance_dsl"
    kind = ArtifactKind.INSTANCE_DSL

    def generate(
        self,
        classes: list[ClassBuilderModel],
        options: GenerationOptions,
    ) -> list[GeneratedFile]:
        self._check_names(classes, options)
        return [GeneratedFile(
            path=module_path(options, "dsl"),
            content=self.render_module(classes, options),
            kind=self.kind,
        )]

    def _check_names(self, classes: list[ClassBuilderModel], options: GenerationOptions) -> None:
        taken = set(_IMPORTED)
        for cls in classes:
            taken.update({
                cls.class_name,
                cls.module_name,
                builder_class(cls),
                rules_constant(cls),
                validate_function(cls),
                wrapper_class(cls),
                wrapper_module(cls),
            })
        taken.update({"dsl", "validation"})
        scope = scope_class(options)
        if scope in taken:
            raise GenerationError(f"DSL scope class '{scope}' collides with a generated name")
        if options.dsl_name in taken or options.dsl_name == scope:
            raise GenerationError(f"dsl_name '{options.dsl_name}' collides with a generated name")

    def render_module(self, classes: list[ClassBuilderModel], options: GenerationOptions) -> str:
        scope = scope_class(options)

        lines = [HEADER]
        if options.include_docs:
            lines += docstring([f"Instance DSL: builders and the {options.dsl_name}() entry point."])
        lines += ["", "from __future__ import annotations", ""]
        lines.append("from typing import Callable, Optional")
        lines.append("")
        lines.append("from rdflib import Graph")
        lines.append("from rdflib.term import Node")
        lines.append("")
        lines.append(f"from {RUNTIME} import InstanceBuilder, InstanceScope, RdfBacked")
        imported = [rules_constant(cls) for cls in classes]
        if options.validation_enabled:
            imported += [validate_function(cls) for cls in classes]
        if imported:
            lines.append("from .validation import (")
            for name in imported:
                lines.append(f"    {name},")
            lines.append(")")

        for cls in classes:
            lines += ["", ""]
            lines += self._builder(cls, options)

        lines += ["", "", f"class {scope}(InstanceScope):"]
        if options.include_docs:
            lines += docstring(["Collects built instances into one graph."], indent="    ")
        if not classes and not options.include_docs:
            lines.append("    pass")
        for cls in classes:
            builder = builder_class(cls)
            lines += [
                "",
                f"    def {cls.builder_name}(self, iri=None) -> {builder}:",
                f"        return {builder}(self, iri)",
            ]

        lines += [
            "",
            "",
            f"def {options.dsl_name}(block: Optional[Callable[[{scope}], None]] = None) -> tuple[Graph, list[Node]]:",
        ]
        if options.include_docs:
            lines += docstring([
                f"Run block against a fresh {scope} and return (graph, built instances).",
            ], indent="    ")
        lines += [
            f"    scope = {scope}()",
            "    if block is not None:",
            "        block(scope)",
            "    return scope.result()",
        ]
        return render(lines)

    # ── Builders ─────────────────────────────────────────────────

    def _builder(self, cls: ClassBuilderModel, options: GenerationOptions) -> list[str]:
        builder = builder_class(cls)
        lines = [f"class {builder}(InstanceBuilder):"]
        if options.include_docs:
            lines += docstring([f"Builds one {cls.class_name} instance."], indent="    ")
            lines.append("")
        lines.append(f"    CLASS_IRI = {cls.class_iri!r}")

        for prop in cls.properties:
            lines.append("")
            lines += self._setter(cls, prop, options)

        if options.validation_enabled:
            lines += [
                "",
                f"    def validate(self) -> {builder}:",
            ]
            if options.include_docs:
                lines += docstring(
                    ["Check the accumulated triples; raise ValidationError listing every violation."],
                    indent="        ",
                )
            lines += [
                f"        {validate_function(cls)}(self.node, self.to_graph())",
                "        return self",
            ]
        return lines

    def _setter(self, cls: ClassBuilderModel, prop: PropertyBuilderModel, options: GenerationOptions) -> list[str]:
        builder = builder_class(cls)
        rule = f"{rules_constant(cls)}[{prop.property_name!r}]"
        action = "_add" if prop.is_list else "_set"
        t = prop.target_type

        if t.kind == TypeKind.LITERAL:
            with_lang = options.support_language_tags and t.is_string
            params = f"value: {t.name}"
            if with_lang:
                params += ", lang: Optional[str] = None"
            datatype = repr(t.datatype) if t.datatype is not None else "None"
            call = f"self.{action}_literal({rule}, value, {datatype}{', lang' if with_lang else ''})"
        else:
            params = "value: Node | str | InstanceBuilder | RdfBacked"
            call = f"self.{action}_object({rule}, value)"

        lines = [f"    def {prop.property_name}(self, {params}) -> {builder}:"]
        if options.include_docs:
            verb = "Add one value to" if prop.is_list else "Set"
            lines += docstring(
                [f"{verb} {prop.property_name} ({prop.property_iri}, {count_summary(prop)})."],
                indent="        ",
            )
        lines.append(f"        return {call}")
        return lines
