import logging

from ontogen.options import GenerationOptions
from ontogen.runner import dry_run, generate_from_files

logging.basicConfig(level=logging.INFO)

# Also accepts a JSON-LD context: try context_path="examples/movies.context.jsonld"
options = GenerationOptions(dsl_name="movies", package_name="movies_model")
report = generate_from_files("examples/movies.shacl.ttl", options)
print(report.print_table())
print()
print(dry_run(report))
