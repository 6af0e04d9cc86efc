"""
Test the runtime library that generated code is built on.
"""

import threading

import pytest
from rdflib import BNode, Graph, Literal, Namespace, RDF, URIRef, XSD

from ontogen.errors import ConstraintViolation, NoFactoryError, ValidationError
from ontogen.runtime import (
    InstanceBuilder,
    InstanceScope,
    LangString,
    Materializer,
    OntologyInterface,
    PropertyRule,
    RdfBacked,
    RdfHandle,
    WrapperRegistry,
    as_node,
    as_rdf,
    check_value,
    from_literal,
    property_violations,
    to_literal,
)

EX = Namespace("http://example.org/movies#")

AGE = PropertyRule(name="age", path=str(EX.age), value_type="int", max_count=1, min_inclusive=0, max_inclusive=120)
NAME = PropertyRule(name="name", path=str(EX.name), min_count=1, max_count=1, min_length=2)
CODE = PropertyRule(name="code", path=str(EX.code), pattern="[a-z]+", flags="i")
RATING = PropertyRule(name="rating", path=str(EX.rating), in_values=("G", "PG"))


# ── Constraints ──────────────────────────────────────────────────


def test_check_value_numeric_bounds():
    check_value(AGE, Literal(0))
    check_value(AGE, Literal(120))

    with pytest.raises(ConstraintViolation, match=r"age must be >= 0 \(minInclusive\), got -1"):
        check_value(AGE, Literal(-1))
    with pytest.raises(ConstraintViolation, match=r"age must be <= 120 \(maxInclusive\), got 121") as exc:
        check_value(AGE, Literal(121))
    assert exc.value.violation.constraint == "maxInclusive"
    assert isinstance(exc.value, ValueError)


def test_check_value_malformed_number():
    with pytest.raises(ConstraintViolation, match="valid int"):
        check_value(AGE, Literal("old"))


@pytest.mark.parametrize("lexical", ["1_000", " 5", "5 ", "+-1", "١٢"])
def test_integer_lexical_form_follows_xsd(lexical):
    with pytest.raises(ConstraintViolation, match="datatype"):
        check_value(AGE, Literal(lexical))
    assert from_literal(Literal(lexical), "int") is None


@pytest.mark.parametrize("lexical, expected", [
    ("+7", 7.0),
    ("1.5e3", 1500.0),
    (".5", 0.5),
    ("INF", float("inf")),
    ("-INF", float("-inf")),
])
def test_float_lexical_forms(lexical, expected):
    assert from_literal(Literal(lexical), "float") == expected


@pytest.mark.parametrize("lexical", ["infinity", "inf", "1_0.5", "nan", " 2.0"])
def test_float_rejects_non_xsd_forms(lexical):
    score = PropertyRule(name="score", path=str(EX.score), value_type="float")
    with pytest.raises(ConstraintViolation, match="datatype"):
        check_value(score, Literal(lexical))


def test_pattern_uses_full_match_and_flags():
    check_value(CODE, Literal("ABC"))  # "i" flag
    with pytest.raises(ConstraintViolation, match="pattern"):
        check_value(CODE, Literal("abc1"))


def test_in_values():
    check_value(RATING, Literal("PG"))
    with pytest.raises(ConstraintViolation, match=r"must be one of \['G', 'PG'\]"):
        check_value(RATING, Literal("R"))


def test_min_length():
    with pytest.raises(ConstraintViolation, match="minLength"):
        check_value(NAME, Literal("A"))


def test_property_violations_accumulate():
    """Every violation is reported, nothing short-circuits."""
    g = Graph()
    node = EX.p1
    g.add((node, EX.age, Literal(-5)))
    g.add((node, EX.age, Literal(200)))

    constraints = sorted(v.constraint for v in property_violations(AGE, g, node))
    assert constraints == ["maxCount", "maxInclusive", "minInclusive"]

    missing = property_violations(NAME, g, node)
    assert len(missing) == 1
    assert missing[0].message == "name is required (minCount=1)"
    assert missing[0].focus_node == str(node)


def test_min_count_above_one():
    rule = PropertyRule(name="tags", path=str(EX.tag), min_count=2)
    g = Graph()
    g.add((EX.p1, EX.tag, Literal("a")))

    [violation] = property_violations(rule, g, EX.p1)
    assert violation.message == "tags must have at least 2 values (minCount=2), found 1"


def test_has_value():
    rule = PropertyRule(name="status", path=str(EX.status), has_value="active")
    g = Graph()
    g.add((EX.p1, EX.status, Literal("inactive")))

    [violation] = property_violations(rule, g, EX.p1)
    assert violation.constraint == "hasValue"

    g.add((EX.p1, EX.status, Literal("active")))
    assert property_violations(rule, g, EX.p1) == []


# ── Literals ─────────────────────────────────────────────────────


def test_from_literal():
    assert from_literal(Literal("42", datatype=XSD.integer), "int") == 42
    assert from_literal(Literal("2.5", datatype=XSD.double), "float") == 2.5
    assert from_literal(Literal("true", datatype=XSD.boolean), "bool") is True
    assert from_literal(Literal("abc", datatype=XSD.integer), "int") is None
    assert from_literal(EX.p1, "str") is None

    paris = from_literal(Literal("Paris", lang="fr"), "str")
    assert isinstance(paris, LangString)
    assert paris == "Paris"
    assert paris.lang == "fr"


def test_to_literal():
    assert to_literal("Ann") == Literal("Ann")
    assert to_literal("Ann", str(XSD.string)) == Literal("Ann")
    assert to_literal("Paris", lang="en") == Literal("Paris", lang="en")
    assert to_literal(7, str(XSD.integer)) == Literal("7", datatype=XSD.integer)
    assert to_literal(False, str(XSD.boolean)) == Literal("false", datatype=XSD.boolean)


# ── Registry / Materializer ──────────────────────────────────────


class Thing(OntologyInterface):
    CLASS_IRI = str(EX.Thing)
    PREDICATES = {"label": str(EX.label)}


class ThingWrapper(Thing, RdfBacked):
    @property
    def label(self):
        return self.rdf.literal(EX.label, "str")


class OtherThingWrapper(ThingWrapper):
    pass


def test_registry_last_write_wins():
    registry = WrapperRegistry()
    registry.register(Thing, ThingWrapper)
    registry.register(Thing, OtherThingWrapper)

    assert len(registry) == 1
    assert registry.factory_for(Thing) is OtherThingWrapper
    assert Thing in registry

    registry.unregister(Thing)
    assert Thing not in registry


def test_registry_concurrent_upserts():
    registry = WrapperRegistry()
    types = [type(f"T{i}", (), {}) for i in range(50)]

    threads = [threading.Thread(target=registry.register, args=(t, ThingWrapper)) for t in types]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(registry) == 50


def test_materialize():
    registry = WrapperRegistry()
    registry.register(Thing, ThingWrapper)
    g = Graph()
    g.add((EX.t1, EX.label, Literal("one")))

    thing = Materializer(registry).materialize("http://example.org/movies#t1", g, Thing)

    assert isinstance(thing, Thing)
    assert thing.label == "one"
    assert thing.rdf.node == EX.t1
    assert as_rdf(thing) is thing.rdf


def test_materialize_without_factory():
    with pytest.raises(NoFactoryError, match="No wrapper factory registered for .*Thing"):
        Materializer(WrapperRegistry()).materialize(EX.t1, Graph(), Thing)


def test_as_rdf_rejects_plain_objects():
    with pytest.raises(TypeError, match="not RDF-backed"):
        as_rdf(object())


def test_wrapper_identity():
    g = Graph()
    a = ThingWrapper(RdfHandle(EX.t1, g))
    b = ThingWrapper(RdfHandle(EX.t1, g))

    assert a == b
    assert len({a, b}) == 1
    assert a != ThingWrapper(RdfHandle(EX.t2, g))


# ── Handle ───────────────────────────────────────────────────────


def test_extras_exclude_known_predicates():
    g = Graph()
    g.add((EX.t1, EX.label, Literal("one")))
    g.add((EX.t1, EX.nickname, Literal("uno")))
    g.add((EX.t1, EX.seeAlso, EX.t2))

    handle = RdfHandle(EX.t1, g, known=[str(EX.label)])
    extras = handle.extras

    assert extras.predicates() == [EX.nickname, EX.seeAlso]
    assert extras.strings(EX.nickname) == ["uno"]
    assert extras.iris(EX.seeAlso) == [EX.t2]
    assert EX.label not in extras
    assert handle.extras is extras


def test_handle_validation():
    g = Graph()
    calls = []

    def validator(node, graph):
        calls.append(node)
        return property_violations(NAME, graph, node)

    handle = RdfHandle(EX.t1, g, validator=validator)

    assert [v.property for v in handle.validate()] == ["name"]
    with pytest.raises(ValidationError, match="name is required") as exc:
        handle.validate_or_raise()
    assert len(exc.value.violations) == 1
    assert calls == [EX.t1, EX.t1]
    assert RdfHandle(EX.t1, g).validate() == []


# ── Builder ──────────────────────────────────────────────────────


class ThingBuilder(InstanceBuilder):
    CLASS_IRI = str(EX.Thing)

    def label(self, value, lang=None):
        return self._set_literal(NAME, value, None, lang)

    def age(self, value):
        return self._set_literal(AGE, value, str(XSD.integer))

    def related(self, value):
        return self._add_object(PropertyRule(name="related", path=str(EX.related), value_type="object"), value)


def test_builder_collects_triples():
    scope = InstanceScope()
    other = ThingBuilder(scope, EX.t2)
    node = ThingBuilder(scope, "http://example.org/movies#t1").label("Ann").label("Bob").age(3).related(other).build()

    assert node == EX.t1
    assert scope.instances == [EX.t1]
    g = scope.graph
    assert (EX.t1, RDF.type, EX.Thing) in g
    assert list(g.objects(EX.t1, EX.name)) == [Literal("Bob")]  # scalar setters replace
    assert (EX.t1, EX.age, Literal("3", datatype=XSD.integer)) in g
    assert (EX.t1, EX.related, EX.t2) in g


def test_builder_rejects_immediately():
    builder = ThingBuilder()
    with pytest.raises(ConstraintViolation, match="age"):
        builder.age(500)
    assert isinstance(builder.node, BNode)
    assert builder.triples == [(builder.node, RDF.type, EX.Thing)]


def test_build_twice_registers_once():
    with InstanceScope() as scope:
        builder = ThingBuilder(scope, EX.t1).label("Ann")
        builder.build()
        builder.build()
    assert scope.result()[1] == [EX.t1]


def test_as_node():
    assert as_node("http://example.org/x") == URIRef("http://example.org/x")
    node = EX.x
    assert as_node(node) is node
    assert as_node(ThingBuilder(iri=EX.y)) == EX.y
    with pytest.raises(TypeError):
        as_node(42)
