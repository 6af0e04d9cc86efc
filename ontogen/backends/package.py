"""
ontogen.backends.package — Emit the generated package's __init__ module.

Importing the package imports every wrapper module, which performs the
load-time registration with the default registry.
"""

from __future__ import annotations

from ontogen.backends.common import (
    HEADER,
    builder_class,
    docstring,
    module_path,
    render,
    scope_class,
    wrapper_class,
    wrapper_module,
)
from ontogen.model import ArtifactKind, ClassBuilderModel, GeneratedFile
from ontogen.options import GenerationOptions


class PackageGenerator:
    name = "package"
    kind = ArtifactKind.PACKAGE

    def generate(
        self,
        classes: list[ClassBuilderModel],
        options: GenerationOptions,
    ) -> list[GeneratedFile]:
        return [GeneratedFile(
            path=module_path(options, "__init__"),
            content=self.render_module(classes, options),
            kind=self.kind,
        )]

    def render_module(self, classes: list[ClassBuilderModel], options: GenerationOptions) -> str:
        lines = [HEADER]
        if options.include_docs:
            lines += docstring([f"Generated ontology package {options.package_name}."])
        lines += ["", "from __future__ import annotations", ""]
        lines.append("from ontogen.runtime import WrapperRegistry, default_registry")
        lines.append("")

        exported: list[str] = []
        for cls in classes:
            lines.append(f"from .{cls.module_name} import {cls.class_name}")
            exported.append(cls.class_name)
        for cls in classes:
            lines.append(f"from .{wrapper_module(cls)} import {wrapper_class(cls)}")
            exported.append(wrapper_class(cls))
        for cls in classes:
            lines.append(f"from . import {wrapper_module(cls)}")

        dsl_names = [builder_class(cls) for cls in classes] + [scope_class(options), options.dsl_name]
        lines.append("from .dsl import (")
        for name in dsl_names:
            lines.append(f"    {name},")
        lines.append(")")
        exported += dsl_names

        lines += ["", "", "def register(registry: WrapperRegistry = default_registry) -> None:"]
        if options.include_docs:
            lines += docstring(["Register every wrapper of this package with registry."], indent="    ")
        if classes:
            for cls in classes:
                lines.append(f"    {wrapper_module(cls)}.register(registry)")
        elif not options.include_docs:
            lines.append("    pass")
        exported.append("register")

        lines += ["", "", "__all__ = ["]
        for name in exported:
            lines.append(f"    {name!r},")
        lines.append("]")
        return render(lines)
