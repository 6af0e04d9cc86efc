"""
ontogen.backends.validation — Emit constraint rules and per-class validation routines.

The rules are always emitted: builder setters check values against them
even when validation routines are disabled. With validation enabled, each
class also gets
  - {module}_violations(node, graph): every violation, no short-circuit
  - validate_{module}(node, graph): raises one ValidationError if any
"""

from __future__ import annotations

from ontogen.backends.common import (
    HEADER,
    RUNTIME,
    docstring,
    module_path,
    py_literal,
    render,
    rules_constant,
    validate_function,
    value_type,
    violations_function,
)
from ontogen.model import ArtifactKind, ClassBuilderModel, GeneratedFile, PropertyBuilderModel
from ontogen.options import GenerationOptions

# PropertyRule keyword -> PropertyConstraints attribute, in emission order
_RULE_FIELDS = [
    "min_count",
    "max_count",
    "min_length",
    "max_length",
    "pattern",
    "flags",
    "in_values",
    "min_inclusive",
    "max_inclusive",
    "min_exclusive",
    "max_exclusive",
    "has_value",
]


class ValidationCodeGenerator:
    name = "validation"
    kind = ArtifactKind.VALIDATION

    def generate(
        self,
        classes: list[ClassBuilderModel],
        options: GenerationOptions,
    ) -> list[GeneratedFile]:
        return [GeneratedFile(
            path=module_path(options, "validation"),
            content=self.render_module(classes, options),
            kind=self.kind,
        )]

    def render_module(self, classes: list[ClassBuilderModel], options: GenerationOptions) -> str:
        lines = [HEADER]
        if options.include_docs:
            lines += docstring(["Constraint rules and validation routines."])
        lines += ["", "from __future__ import annotations", ""]
        if options.validation_enabled:
            lines.append(f"from {RUNTIME} import PropertyRule, ValidationError, Violation, shape_violations")
        else:
            lines.append(f"from {RUNTIME} import PropertyRule")

        for cls in classes:
            lines += ["", ""]
            lines += self._rules(cls)
        if options.validation_enabled:
            for cls in classes:
                lines += ["", ""]
                lines += self._routines(cls, options)
        return render(lines)

    def _rules(self, cls: ClassBuilderModel) -> list[str]:
        if not cls.properties:
            return [f"{rules_constant(cls)}: dict[str, PropertyRule] = {{}}"]
        lines = [f"{rules_constant(cls)}: dict[str, PropertyRule] = {{"]
        for prop in cls.properties:
            lines.append(f"    {prop.property_name!r}: {self.rule_expression(prop)},")
        lines.append("}")
        return lines

    def rule_expression(self, prop: PropertyBuilderModel) -> str:
        args = [
            f"name={prop.property_name!r}",
            f"path={prop.property_iri!r}",
            f"value_type={value_type(prop)!r}",
        ]
        for field in _RULE_FIELDS:
            value = getattr(prop.constraints, field)
            if field == "min_count" and value == 0:
                continue
            if value is None:
                continue
            args.append(f"{field}={py_literal(value)}")
        return f"PropertyRule({', '.join(args)})"

    def _routines(self, cls: ClassBuilderModel, options: GenerationOptions) -> list[str]:
        violations = violations_function(cls)
        lines = [f"def {violations}(node, graph) -> list[Violation]:"]
        if options.include_docs:
            lines += docstring([f"Every violation of the {cls.class_name} shape on node."], indent="    ")
        lines.append(f"    return shape_violations({rules_constant(cls)}.values(), graph, node)")
        lines += ["", ""]
        lines.append(f"def {validate_function(cls)}(node, graph) -> None:")
        if options.include_docs:
            lines += docstring(
                [f"Raise ValidationError listing every violation of the {cls.class_name} shape on node."],
                indent="    ",
            )
        lines += [
            f"    violations = {violations}(node, graph)",
            "    if violations:",
            f"        raise ValidationError(f\"{cls.class_name} {{node}} failed validation\", violations)",
        ]
        return lines
