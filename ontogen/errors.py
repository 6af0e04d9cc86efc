"""
ontogen.errors — Exception hierarchy shared by the generator and its runtime.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from ontogen.runtime.constraints import Violation


class OntogenError(Exception):
    """Base class for every error raised by ontogen."""


# ─── Parse time ──────────────────────────────────────────────────────


class ShaclParseError(OntogenError):
    """The SHACL document could not be parsed. Aborts the run."""

    def __init__(self, message: str, source: str = "<string>"):
        super().__init__(f"{source}: {message}")
        self.source = source


class ContextParseError(OntogenError):
    """The JSON-LD context document is unusable."""


# ─── Generation time ─────────────────────────────────────────────────


class GenerationError(OntogenError):
    """The IR cannot be turned into source code."""


# ─── Run time (generated code) ───────────────────────────────────────


class MaterializationError(OntogenError):
    """Base for failures while turning a graph node into a domain object."""


class NoFactoryError(MaterializationError, LookupError):
    """No wrapper factory is registered for the requested interface."""

    def __init__(self, iface: type):
        super().__init__(f"No wrapper factory registered for {iface.__module__}.{iface.__qualname__}")
        self.iface = iface


class ValidationError(MaterializationError):
    """Deferred validation found one or more violations.

    All violations of the focus node are reported together.
    """

    def __init__(self, message: str, violations: list[Violation]):
        details = "; ".join(v.message for v in violations)
        super().__init__(f"{message}: {details}" if details else message)
        self.violations = list(violations)


class ConstraintViolation(OntogenError, ValueError):
    """A builder setter rejected a value. Raised on the first failed constraint."""

    def __init__(self, violation: Violation, message: Optional[str] = None):
        super().__init__(message or violation.message)
        self.violation = violation
