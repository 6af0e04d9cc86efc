"""
ontogen playground — Interactive web UI for generating code from SHACL shapes.

Run with: uv run python playground.py
"""

from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates
from pydantic import BaseModel

from ontogen.errors import OntogenError
from ontogen.ontology import parse_ontology
from ontogen.options import GenerationOptions
from ontogen.runner import dry_run, generate

app = FastAPI()
templates = Jinja2Templates(directory=Path(__file__).parent / "templates")

EXAMPLE_SHACL = """\
@prefix ex:  <http://example.org/movies#> .
@prefix sh:  <http://www.w3.org/ns/shacl#> .
@prefix xsd: <http://www.w3.org/2001/XMLSchema#> .

ex:MovieShape
    a sh:NodeShape ;
    sh:targetClass ex:Movie ;
    sh:property [ sh:path ex:title ;     sh:datatype xsd:string ;  sh:minCount 1 ; sh:maxCount 1 ] ;
    sh:property [ sh:path ex:released ;  sh:datatype xsd:integer ; sh:maxCount 1 ; sh:minInclusive 1888 ] ;
    sh:property [ sh:path ex:hasActor ;  sh:class ex:Person ; sh:minCount 1 ] ;
    sh:property [ sh:path ex:rating ;    sh:in ( "G" "PG" "PG-13" "R" "NC-17" ) ; sh:maxCount 1 ] .

ex:PersonShape
    a sh:NodeShape ;
    sh:targetClass ex:Person ;
    sh:property [ sh:path ex:name ;  sh:datatype xsd:string ;  sh:minCount 1 ; sh:maxCount 1 ] ;
    sh:property [ sh:path ex:born ;  sh:datatype xsd:integer ; sh:maxCount 1 ] ;
    sh:property [ sh:path ex:email ; sh:datatype xsd:string ;  sh:pattern "^[^@]+@[^@]+$" ] .
"""

EXAMPLE_CONTEXT = """\
{
  "@context": {
    "ex": "http://example.org/movies#",
    "hasActor": { "@id": "ex:hasActor", "@type": "@id" }
  }
}
"""


class GenerateRequest(BaseModel):
    shacl: str
    context: str = ""
    format: str = "turtle"
    dsl_name: str = "instances"
    package_name: str = "generated"
    validation_enabled: bool = True
    support_language_tags: bool = False
    include_docs: bool = True


@app.post("/api/generate")
def generate_code(req: GenerateRequest):
    try:
        options = GenerationOptions(
            dsl_name=req.dsl_name,
            package_name=req.package_name,
            validation_enabled=req.validation_enabled,
            support_language_tags=req.support_language_tags,
            include_docs=req.include_docs,
        )
        model = parse_ontology(
            req.shacl,
            req.context or None,
            source="<playground>",
            format=req.format,
        )
        report = generate(model, options)
        return {
            "ok": True,
            "report": report.to_dict(),
            "summary": report.print_table(),
            "source": dry_run(report),
        }
    except (OntogenError, ValueError) as e:
        return {
            "ok": False,
            "error": f"{type(e).__name__}: {e}",
        }


@app.get("/", response_class=HTMLResponse)
def index(request: Request):
    return templates.TemplateResponse(
        request,
        "playground.html",
        {
            "example_shacl": EXAMPLE_SHACL,
            "example_context": EXAMPLE_CONTEXT,
        },
    )


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="127.0.0.1", port=8420)
