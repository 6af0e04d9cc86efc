import importlib
import itertools
import sys

import pytest

from ontogen.ontology import parse_ontology
from ontogen.options import GenerationOptions
from ontogen.runner import generate, write_files

_package_ids = itertools.count()


@pytest.fixture
def examples_dir(request):
    return request.config.rootpath / "examples"


@pytest.fixture
def movies_shacl(examples_dir):
    return (examples_dir / "movies.shacl.ttl").read_text()


@pytest.fixture
def movies_context(examples_dir):
    return (examples_dir / "movies.context.jsonld").read_text()


@pytest.fixture
def load_generated(tmp_path, monkeypatch):
    """Generate a package from SHACL text, write it to tmp_path and import it.

    Every call uses a fresh package name, so generated classes never leak
    between tests through sys.modules.
    """
    monkeypatch.syspath_prepend(str(tmp_path))
    loaded: list[str] = []

    def load(shacl, context=None, dsl_name="movies", **options):
        package = f"generated_{next(_package_ids)}"
        opts = GenerationOptions(dsl_name=dsl_name, package_name=package, **options)
        report = generate(parse_ontology(shacl, context, source="test.ttl"), opts)
        write_files(report, tmp_path)
        importlib.invalidate_caches()
        loaded.append(package)
        return importlib.import_module(package)

    yield load

    for package in loaded:
        for name in [m for m in sys.modules if m == package or m.startswith(f"{package}.")]:
            del sys.modules[name]


@pytest.fixture
def movies(load_generated, movies_shacl):
    """The generated movies package, with language-tag support."""
    return load_generated(movies_shacl, support_language_tags=True)
