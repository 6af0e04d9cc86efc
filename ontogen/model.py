"""
ontogen.model — Intermediate representation shared by parsers and generators.

The parsers produce ShaclShape / JsonLdContext, the ontology builder joins
them into an OntologyModel and resolves it into ClassBuilderModel objects,
and every generator reads only those.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field, asdict
from enum import Enum
from typing import Optional


# ─── SHACL ───────────────────────────────────────────────────────────


@dataclass
class ShaclProperty:
    path: str
    name: str
    description: str = ""
    datatype: Optional[str] = None
    target_class: Optional[str] = None
    # Cardinality — SHACL defaults: minCount=0, maxCount=unbounded
    min_count: int = 0
    max_count: Optional[int] = None
    # Value constraints
    min_length: Optional[int] = None
    max_length: Optional[int] = None
    pattern: Optional[str] = None
    flags: Optional[str] = None
    in_values: Optional[list[str]] = None
    min_inclusive: Optional[float] = None
    max_inclusive: Optional[float] = None
    min_exclusive: Optional[float] = None
    max_exclusive: Optional[float] = None
    has_value: Optional[str] = None
    node_kind: Optional[str] = None
    order: Optional[float] = None


@dataclass
class ShaclShape:
    shape_iri: str
    target_class: str
    properties: list[ShaclProperty] = field(default_factory=list)


# ─── JSON-LD context ─────────────────────────────────────────────────


JSONLD_ID = "@id"


class JsonLdContainer(str, Enum):
    LIST = "@list"
    SET = "@set"
    INDEX = "@index"
    LANGUAGE = "@language"


@dataclass
class JsonLdProperty:
    id: str
    type: Optional[str] = None  # datatype IRI, or JSONLD_ID for object references
    container: Optional[str] = None

    @property
    def is_reference(self) -> bool:
        return self.type == JSONLD_ID


@dataclass
class JsonLdContext:
    prefixes: dict[str, str] = field(default_factory=dict)
    type_mappings: dict[str, str] = field(default_factory=dict)
    property_mappings: dict[str, JsonLdProperty] = field(default_factory=dict)
    base_iri: Optional[str] = None
    vocab_iri: Optional[str] = None

    def term_for(self, iri: str) -> Optional[tuple[str, JsonLdProperty]]:
        """Return the (term, definition) whose @id expands to iri."""
        for term, prop in self.property_mappings.items():
            if prop.id == iri:
                return term, prop
        return None


# ─── Ontology model ──────────────────────────────────────────────────


@dataclass(frozen=True)
class OntologyClass:
    class_iri: str
    class_name: str
    super_classes: tuple[str, ...] = ()


@dataclass(frozen=True)
class OntologyModel:
    """Everything a generator may look at. Built once per run."""

    shapes: tuple[ShaclShape, ...]
    context: JsonLdContext = field(default_factory=JsonLdContext)
    classes: tuple[OntologyClass, ...] = ()
    source: str = "<string>"

    def shape_for(self, class_iri: str) -> Optional[ShaclShape]:
        for shape in self.shapes:
            if shape.target_class == class_iri:
                return shape
        return None


# ─── Resolved (generation-ready) model ───────────────────────────────


class TypeKind(str, Enum):
    LITERAL = "literal"
    OBJECT = "object"  # reference to a generated class
    RESOURCE = "resource"  # reference to something with no generated class


@dataclass(frozen=True)
class ResolvedType:
    kind: TypeKind
    name: str  # Python type name: "str", "int", "Person", "Node", ...
    datatype: Optional[str] = None
    module: Optional[str] = None  # generated module holding an OBJECT target

    @property
    def is_numeric(self) -> bool:
        return self.kind == TypeKind.LITERAL and self.name in ("int", "float")

    @property
    def is_string(self) -> bool:
        return self.kind == TypeKind.LITERAL and self.name == "str"


@dataclass(frozen=True)
class PropertyConstraints:
    min_count: int = 0
    max_count: Optional[int] = None
    min_length: Optional[int] = None
    max_length: Optional[int] = None
    pattern: Optional[str] = None
    flags: Optional[str] = None
    in_values: Optional[tuple[str, ...]] = None
    min_inclusive: Optional[float] = None
    max_inclusive: Optional[float] = None
    min_exclusive: Optional[float] = None
    max_exclusive: Optional[float] = None
    has_value: Optional[str] = None

    @classmethod
    def from_property(cls, prop: ShaclProperty) -> PropertyConstraints:
        return cls(
            min_count=prop.min_count,
            max_count=prop.max_count,
            min_length=prop.min_length,
            max_length=prop.max_length,
            pattern=prop.pattern,
            flags=prop.flags,
            in_values=tuple(prop.in_values) if prop.in_values is not None else None,
            min_inclusive=prop.min_inclusive,
            max_inclusive=prop.max_inclusive,
            min_exclusive=prop.min_exclusive,
            max_exclusive=prop.max_exclusive,
            has_value=prop.has_value,
        )

    @property
    def has_value_checks(self) -> bool:
        return any(v is not None for v in (
            self.min_length, self.max_length, self.pattern, self.in_values,
            self.min_inclusive, self.max_inclusive, self.min_exclusive, self.max_exclusive,
        ))


@dataclass
class PropertyBuilderModel:
    property_name: str
    property_iri: str
    target_type: ResolvedType
    is_required: bool
    is_list: bool
    constraints: PropertyConstraints
    description: str = ""
    inherited: bool = False


@dataclass
class ClassBuilderModel:
    class_name: str
    class_iri: str
    builder_name: str
    module_name: str
    properties: list[PropertyBuilderModel]
    shape_iri: Optional[str] = None
    super_classes: list[str] = field(default_factory=list)  # generated class names
    description: str = ""

    @property
    def own_properties(self) -> list[PropertyBuilderModel]:
        return [p for p in self.properties if not p.inherited]

    @property
    def known_predicates(self) -> list[str]:
        seen: list[str] = []
        for p in self.properties:
            if p.property_iri not in seen:
                seen.append(p.property_iri)
        return seen

    def to_dict(self) -> dict:
        d = asdict(self)
        for p in d["properties"]:
            p["target_type"]["kind"] = p["target_type"]["kind"].value
        return d

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent)


# ─── Output ──────────────────────────────────────────────────────────


class ArtifactKind(str, Enum):
    INTERFACE = "interface"
    WRAPPER = "wrapper"
    VALIDATION = "validation"
    INSTANCE_DSL = "instance_dsl"
    PACKAGE = "package"


@dataclass
class GeneratedFile:
    path: str  # relative, "/"-separated
    content: str
    kind: ArtifactKind
    class_name: Optional[str] = None
