"""
ontogen.backends — Generator protocol for source emission.

Each generator turns the resolved class models into the source files of
one artifact kind. Generators never look at each other's output; they
share only the IR and the naming conventions in backends.common.
"""

from __future__ import annotations

from typing import Protocol

from ontogen.model import ArtifactKind, ClassBuilderModel, GeneratedFile
from ontogen.options import GenerationOptions


class Generator(Protocol):
    """Interface that every artifact generator must implement."""

    name: str
    kind: ArtifactKind

    def generate(
        self,
        classes: list[ClassBuilderModel],
        options: GenerationOptions,
    ) -> list[GeneratedFile]:
        """Emit the files of this artifact kind.

        Paths are relative to the output root and start with
        options.package_path. Classes are emitted in the order given.
        """
        ...
