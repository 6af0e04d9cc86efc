"""
ontogen.runner — Run the generators over an OntologyModel.

The runner resolves the model once, hands the same class models to every
generator, and collects the emitted files into a GenerationReport. The
report can be printed (dry run) or written to disk.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Union

from rdflib.util import guess_format

from ontogen.backends import Generator
from ontogen.backends.instance_dsl import InstanceDslGenerator
from ontogen.backends.interfaces import InterfaceGenerator
from ontogen.backends.package import PackageGenerator
from ontogen.backends.validation import ValidationCodeGenerator
from ontogen.backends.wrappers import WrapperGenerator
from ontogen.errors import GenerationError
from ontogen.model import ClassBuilderModel, GeneratedFile, OntologyModel
from ontogen.ontology import OntologyModelBuilder, parse_ontology
from ontogen.options import GenerationOptions

logger = logging.getLogger(__name__)

GENERATORS = {
    "interfaces": InterfaceGenerator,
    "wrappers": WrapperGenerator,
    "validation": ValidationCodeGenerator,
    "instance_dsl": InstanceDslGenerator,
    "package": PackageGenerator,
}


# ─── Report types ────────────────────────────────────────────────────

@dataclass
class GenerationReport:
    source: str
    package_name: str
    dsl_name: str
    generated_at: str
    generators: list[str]
    classes: list[ClassBuilderModel]
    skipped: list[str]  # class IRIs without a shape
    files: list[GeneratedFile] = field(default_factory=list)

    @property
    def class_names(self) -> list[str]:
        return [c.class_name for c in self.classes]

    def file(self, path: str) -> GeneratedFile:
        for f in self.files:
            if f.path == path:
                return f
        raise KeyError(path)

    def to_dict(self) -> dict:
        return {
            "source": self.source,
            "package_name": self.package_name,
            "dsl_name": self.dsl_name,
            "generated_at": self.generated_at,
            "generators": self.generators,
            "summary": {
                "classes": len(self.classes),
                "skipped": len(self.skipped),
                "files": len(self.files),
            },
            "classes": [c.to_dict() for c in self.classes],
            "skipped": self.skipped,
            "files": [
                {
                    "path": f.path,
                    "kind": f.kind.value,
                    "class_name": f.class_name,
                    "content": f.content,
                }
                for f in self.files
            ],
        }

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent)

    def print_table(self) -> str:
        """Format report as a human-readable table."""
        lines = []

        lines.append("ontogen generation report")
        lines.append(f"  schema: {self.source}")
        lines.append(f"  package: {self.package_name}")
        lines.append(f"  generated: {self.generated_at}")
        lines.append("")
        lines.append(
            f"  {len(self.classes)} classes  |  {len(self.files)} files  |  "
            f"{len(self.skipped)} skipped"
        )
        lines.append("")

        if self.classes:
            lines.append("  CLASSES:")
            lines.append("")
            for c in self.classes:
                supers = f" ({', '.join(c.super_classes)})" if c.super_classes else ""
                lines.append(f"  ✓ {c.class_name}{supers}  <{c.class_iri}>")
                for p in c.properties:
                    shape = "list" if p.is_list else "scalar"
                    required = " required" if p.is_required else ""
                    lines.append(f"      → {p.property_name}: {p.target_type.name} [{shape}{required}]")
            lines.append("")

        if self.skipped:
            lines.append("  SKIPPED (no shape):")
            for iri in self.skipped:
                lines.append(f"  - {iri}")
            lines.append("")

        lines.append("  FILES:")
        for f in self.files:
            lines.append(f"    {f.path}  ({f.kind.value})")

        return "\n".join(lines)


# ─── Generate ────────────────────────────────────────────────────────

def _resolve_generators(generators) -> list[Generator]:
    if generators is None:
        return [cls() for cls in GENERATORS.values()]
    resolved = []
    for gen in generators:
        if isinstance(gen, str):
            factory = GENERATORS.get(gen)
            if factory is None:
                raise GenerationError(
                    f"Unknown generator '{gen}'. Available: {', '.join(GENERATORS)}"
                )
            gen = factory()
        resolved.append(gen)
    return resolved


def generate(
    model: OntologyModel,
    options: GenerationOptions,
    generators: Optional[list[Union[str, Generator]]] = None,
) -> GenerationReport:
    """Resolve the model once and run every generator over it."""
    builder = OntologyModelBuilder(model)
    classes = builder.build()
    skipped = builder.skipped_classes()
    gens = _resolve_generators(generators)

    files: list[GeneratedFile] = []
    for gen in gens:
        emitted = gen.generate(classes, options)
        logger.debug("%s emitted %d files", gen.name, len(emitted))
        files.extend(emitted)

    return GenerationReport(
        source=model.source,
        package_name=options.package_name,
        dsl_name=options.dsl_name,
        generated_at=datetime.now(timezone.utc).isoformat(),
        generators=[g.name for g in gens],
        classes=classes,
        skipped=skipped,
        files=files,
    )


def generate_from_files(
    shacl_path: Union[str, Path],
    options: GenerationOptions,
    context_path: Union[str, Path, None] = None,
    generators: Optional[list[Union[str, Generator]]] = None,
) -> GenerationReport:
    shacl_path = Path(shacl_path)
    fmt = guess_format(str(shacl_path)) or "turtle"
    context = Path(context_path).read_text() if context_path is not None else None
    model = parse_ontology(shacl_path.read_text(), context, source=shacl_path.name, format=fmt)
    return generate(model, options, generators)


# ─── Output ──────────────────────────────────────────────────────────

def dry_run(report: GenerationReport) -> str:
    """Return every generated file as one formatted string."""
    lines = []
    for f in report.files:
        lines.append(f"# ── {f.path} ({f.kind.value}) ──")
        lines.append(f.content)
    return "\n".join(lines)


def write_files(report: GenerationReport, out_dir: Union[str, Path]) -> list[Path]:
    """Write the generated files below out_dir and return their paths."""
    root = Path(out_dir)
    written = []
    for f in report.files:
        target = root / f.path
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(f.content)
        written.append(target)
        logger.info("Wrote %s", target)
    return written
