"""
End to end: SHACL -> generated package -> build instances -> read them back.
"""

import pytest
from rdflib import BNode, Graph, Literal, Namespace, RDF, URIRef, XSD

from ontogen.errors import ConstraintViolation, NoFactoryError, ValidationError
from ontogen.runtime import Materializer, WrapperRegistry, as_rdf, default_registry

EX = Namespace("http://example.org/movies#")
ANN = URIRef("http://example.org/people/ann")


def _read(movies, graph, node, iface=None):
    return Materializer().materialize(node, graph, iface or movies.Person)


# ── Shape of the generated package ───────────────────────────────


def test_only_matched_classes_are_generated(movies):
    assert hasattr(movies, "Person")
    assert hasattr(movies, "Actor")
    assert hasattr(movies, "Movie")
    assert not hasattr(movies, "Studio")
    assert not hasattr(movies, "Genre")
    assert not hasattr(movies, "StudioBuilder")


def test_one_accessor_per_property(movies):
    assert set(movies.Person.PREDICATES) == {"name", "age", "email", "lives_in", "knows"}
    assert movies.Person.__abstractmethods__ == frozenset(movies.Person.PREDICATES)
    assert movies.Actor.predicate_for("name") == str(EX.name)
    assert movies.Actor.predicate_for("stage_name") == str(EX.stageName)


def test_wrappers_register_on_import(movies):
    assert default_registry.factory_for(movies.Person) is movies.PersonWrapper
    assert default_registry.factory_for(movies.Movie) is movies.MovieWrapper


# ── Round trip ───────────────────────────────────────────────────


def test_round_trip(movies):
    graph, instances = movies.movies(
        lambda dsl: dsl.person(ANN).name("Ann").age(42).email("ann@example.org").build()
    )
    assert instances == [ANN]

    person = _read(movies, graph, ANN)
    assert isinstance(person, movies.Person)
    assert person.name == "Ann"
    assert person.age == 42
    assert person.email == "ann@example.org"
    assert person.lives_in == []
    assert person.knows == []


def test_scalar_and_list_accessors(movies):
    def build(dsl):
        bob = dsl.person("http://example.org/people/bob").name("Bob").build()
        dsl.person(ANN).name("Ann").knows(bob).knows("http://example.org/people/cy").build()

    graph, _ = movies.movies(build)
    ann = _read(movies, graph, ANN)

    assert isinstance(ann.knows, list)
    names = {str(p.rdf.node): p.name for p in ann.knows}
    assert names == {"http://example.org/people/bob": "Bob", "http://example.org/people/cy": None}


def test_object_and_resource_properties(movies):
    def build(dsl):
        director = dsl.person("http://example.org/people/dir").name("Dee")
        (
            dsl.movie(EX.m1)
            .title("Heat")
            .released(1995)
            .score(8.5)
            .featured(True)
            .director(director)
            .in_genre(EX.Crime)
            .in_genre(EX.Drama)
            .rating("R")
            .build()
        )
        director.build()

    graph, instances = movies.movies(build)
    movie = Materializer().materialize(EX.m1, graph, movies.Movie)

    assert instances == [EX.m1, URIRef("http://example.org/people/dir")]
    assert movie.title == "Heat"
    assert movie.released == 1995
    assert movie.score == 8.5
    assert movie.featured is True
    assert movie.rating == "R"
    assert movie.director.name == "Dee"
    assert isinstance(movie.director, movies.Person)
    assert sorted(movie.in_genre) == [EX.Crime, EX.Drama]


def test_inherited_accessors(movies):
    graph, _ = movies.movies(
        lambda dsl: dsl.actor(ANN).name("Ann").stage_name("A.").acted_in(EX.m1).build()
    )
    graph.add((EX.m1, EX.title, Literal("Heat")))
    actor = Materializer().materialize(ANN, graph, movies.Actor)

    assert isinstance(actor, movies.Person)
    assert actor.name == "Ann"
    assert actor.stage_name == "A."
    assert [m.title for m in actor.acted_in] == ["Heat"]
    assert (ANN, RDF.type, EX.Actor) in graph


# ── Immediate checks in setters ──────────────────────────────────


def test_numeric_bounds(movies):
    dsl = movies.MoviesDsl()
    dsl.person().age(0)
    dsl.person().age(120)

    with pytest.raises(ConstraintViolation, match=r"age must be >= 0 \(minInclusive\), got -1"):
        dsl.person().age(-1)
    with pytest.raises(ConstraintViolation, match=r"age must be <= 120 \(maxInclusive\), got 121"):
        dsl.person().age(121)


def test_email_pattern(movies):
    builder = movies.MoviesDsl().person()
    builder.email("a@b.co")

    with pytest.raises(ConstraintViolation, match="email must match pattern") as exc:
        builder.email("not-an-email")
    assert exc.value.violation.property == "email"
    assert exc.value.violation.value == "not-an-email"


def test_other_value_constraints(movies):
    dsl = movies.MoviesDsl()

    with pytest.raises(ConstraintViolation, match="minLength"):
        dsl.person().name("")
    with pytest.raises(ConstraintViolation, match="one of"):
        dsl.movie().rating("X")
    with pytest.raises(ConstraintViolation, match=r"score must be > 0 \(minExclusive\)"):
        dsl.movie().score(0)
    with pytest.raises(ConstraintViolation, match="maxLength"):
        dsl.movie().title("x" * 201)


# ── Language tags ────────────────────────────────────────────────


def test_language_tagged_list(movies):
    graph, _ = movies.movies(
        lambda dsl: dsl.person(ANN).name("Ann").lives_in("Paris", lang="en").lives_in("Paris", lang="fr").build()
    )

    assert (ANN, EX.livesIn, Literal("Paris", lang="en")) in graph
    assert (ANN, EX.livesIn, Literal("Paris", lang="fr")) in graph

    values = _read(movies, graph, ANN).lives_in
    assert len(values) == 2
    assert {(v, v.lang) for v in values} == {("Paris", "en"), ("Paris", "fr")}


def test_untagged_string_is_plain_literal(movies):
    graph, _ = movies.movies(lambda dsl: dsl.person(ANN).name("Ann").build())
    assert list(graph.objects(ANN, EX.name)) == [Literal("Ann")]


def test_language_parameter_needs_option(load_generated, movies_shacl):
    plain = load_generated(movies_shacl)
    with pytest.raises(TypeError):
        plain.MoviesDsl().person().name("Ann", lang="en")


# ── Deferred validation ──────────────────────────────────────────


def test_required_but_unset(movies):
    dsl = movies.MoviesDsl()
    builder = dsl.person(ANN).age(30)

    with pytest.raises(ValidationError) as exc:
        builder.validate()
    [violation] = exc.value.violations
    assert violation.property == "name"
    assert violation.message == "name is required (minCount=1)"

    assert builder.build() == ANN
    assert dsl.instances == [ANN]


def test_validate_is_idempotent(movies):
    builder = movies.MoviesDsl().person(ANN).age(30)

    with pytest.raises(ValidationError) as first:
        builder.validate()
    with pytest.raises(ValidationError) as second:
        builder.validate()
    assert first.value.violations == second.value.violations


def test_valid_builder_passes(movies):
    builder = movies.MoviesDsl().person(ANN).name("Ann")
    assert builder.validate() is builder


def test_wrapper_validation_reports_everything(movies):
    graph = Graph()
    graph.add((ANN, EX.age, Literal(200)))
    graph.add((ANN, EX.email, Literal("nope")))
    graph.add((ANN, EX.email, Literal("a@b.co")))

    person = _read(movies, graph, ANN)
    violations = person.rdf.validate()

    assert sorted(v.constraint for v in violations) == ["maxCount", "maxInclusive", "minCount", "pattern"]
    assert person.rdf.validate() == violations


def test_materialize_validated(movies):
    graph, _ = movies.movies(lambda dsl: dsl.person(ANN).age(30).build())

    with pytest.raises(ValidationError, match="name is required"):
        Materializer().materialize_validated(ANN, graph, movies.Person)

    graph.add((ANN, EX.name, Literal("Ann")))
    assert Materializer().materialize_validated(ANN, graph, movies.Person).name == "Ann"


def test_malformed_literal(movies):
    graph = Graph()
    graph.add((ANN, EX.name, Literal("Ann")))
    graph.add((ANN, EX.age, Literal("old", datatype=XSD.integer)))
    person = _read(movies, graph, ANN)

    assert person.age is None
    assert [v.constraint for v in person.rdf.validate()] == ["datatype"]


def test_validation_disabled(load_generated, movies_shacl):
    plain = load_generated(movies_shacl, validation_enabled=False)
    builder = plain.MoviesDsl().person(ANN)

    assert not hasattr(builder, "validate")
    with pytest.raises(ConstraintViolation):
        builder.age(-1)  # setters still check values

    graph, _ = plain.movies(lambda dsl: dsl.person(ANN).build())
    assert Materializer().materialize(ANN, graph, plain.Person).rdf.validate() == []


# ── Wrapper behaviour ────────────────────────────────────────────


def test_accessors_are_memoized(movies):
    graph, _ = movies.movies(lambda dsl: dsl.person(ANN).name("Ann").build())
    person = _read(movies, graph, ANN)

    assert person.name == "Ann"
    graph.set((ANN, EX.name, Literal("Bob")))
    assert person.name == "Ann"
    assert _read(movies, graph, ANN).name == "Bob"


def test_scalar_takes_the_first_inserted_value(movies):
    graph = Graph()
    for name in ("Zeta", "Alpha", "Mid"):
        graph.add((ANN, EX.name, Literal(name)))

    person = _read(movies, graph, ANN)
    assert person.name == "Zeta"
    assert [v.constraint for v in person.rdf.validate()] == ["maxCount"]


def test_extras(movies):
    graph, _ = movies.movies(lambda dsl: dsl.person(ANN).name("Ann").build())
    graph.add((ANN, EX.nickname, Literal("Annie")))

    extras = as_rdf(_read(movies, graph, ANN)).extras

    assert EX.nickname in extras.predicates()
    assert extras.strings(EX.nickname) == ["Annie"]
    assert EX.name not in extras
    assert RDF.type in extras  # rdf:type is not bound to an accessor


def test_blank_node_instances(movies):
    graph, [node] = movies.movies(lambda dsl: dsl.person().name("Anon").build())

    assert isinstance(node, BNode)
    assert _read(movies, graph, node).name == "Anon"


def test_registry_injection(movies):
    registry = WrapperRegistry()
    movies.register(registry)

    class CustomPerson(movies.PersonWrapper):
        pass

    registry.register(movies.Person, CustomPerson)
    graph, _ = movies.movies(lambda dsl: dsl.person(ANN).name("Ann").build())

    person = Materializer(registry).materialize(ANN, graph, movies.Person)
    assert type(person) is CustomPerson
    assert type(Materializer().materialize(ANN, graph, movies.Person)) is movies.PersonWrapper


def test_nested_objects_use_the_same_registry(movies):
    registry = WrapperRegistry()
    registry.register(movies.Movie, movies.MovieWrapper)
    graph, _ = movies.movies(
        lambda dsl: dsl.movie(EX.m1).title("Heat").director(ANN).build()
    )

    movie = Materializer(registry).materialize(EX.m1, graph, movies.Movie)
    with pytest.raises(NoFactoryError, match="Person"):
        movie.director
