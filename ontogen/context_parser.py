"""
ontogen.context_parser — Parse a JSON-LD @context into a JsonLdContext.

Simple string entries ending in '#' or '/' are prefixes; other string
entries are type mappings; object entries with an @id are property
definitions (@type "@id" marks an object reference).
"""

from __future__ import annotations

import json
import logging
from typing import Optional, Union

from ontogen.errors import ContextParseError
from ontogen.model import JsonLdContext, JsonLdProperty, JSONLD_ID

logger = logging.getLogger(__name__)


def parse_context(document: Union[str, dict], source: str = "<string>") -> JsonLdContext:
    """Parse a JSON-LD document (text or already-decoded dict) containing @context."""

    if isinstance(document, str):
        try:
            document = json.loads(document)
        except json.JSONDecodeError as e:
            raise ContextParseError(f"{source}: invalid JSON: {e}") from e

    if not isinstance(document, dict):
        raise ContextParseError(f"{source}: JSON-LD document must be an object")

    contexts = _extract_contexts(document.get("@context"), source)
    if not contexts:
        raise ContextParseError(f"{source}: no @context found")

    ctx = JsonLdContext()

    for context in contexts:
        _extract_prefixes(context, ctx.prefixes)
        if isinstance(context.get("@base"), str):
            ctx.base_iri = context["@base"]
        if isinstance(context.get("@vocab"), str):
            ctx.vocab_iri = context["@vocab"]

        for key, value in context.items():
            if key.startswith("@"):
                continue

            if isinstance(value, str) and ":" not in key:
                if _is_prefix_definition(value):
                    continue
                ctx.type_mappings[key] = _expand(value, ctx, source)
                logger.debug("Type mapping %s -> %s", key, ctx.type_mappings[key])

            elif isinstance(value, dict):
                term_id = value.get("@id")
                if term_id is None:
                    continue
                term_type = value.get("@type")
                if term_type is not None and term_type != JSONLD_ID:
                    term_type = _expand(term_type, ctx, source)
                ctx.property_mappings[key] = JsonLdProperty(
                    id=_expand(term_id, ctx, source),
                    type=term_type,
                    container=value.get("@container"),
                )
                logger.debug("Property %s -> %s", key, ctx.property_mappings[key])

    logger.info(
        "Parsed context %s: %d prefixes, %d types, %d properties",
        source, len(ctx.prefixes), len(ctx.type_mappings), len(ctx.property_mappings),
    )
    return ctx


def _extract_contexts(element, source: str) -> list[dict]:
    if element is None:
        return []
    if isinstance(element, dict):
        return [element]
    if isinstance(element, list):
        return [c for c in element if isinstance(c, dict)]
    if isinstance(element, str):
        raise ContextParseError(f"{source}: external @context references are not supported: {element}")
    return []


def _extract_prefixes(context: dict, prefixes: dict[str, str]) -> None:
    for key, value in context.items():
        if key.startswith("@") or ":" in key:
            continue
        if isinstance(value, str) and _is_prefix_definition(value):
            prefixes[key] = value


def _is_prefix_definition(iri: str) -> bool:
    return iri.endswith("#") or iri.endswith("/")


def _is_absolute(term: str) -> bool:
    return "://" in term or term.startswith("urn:")


def _expand(term: str, ctx: JsonLdContext, source: str) -> str:
    """Expand a compact IRI / term against prefixes, @vocab and @base."""
    prefix, sep, rest = term.partition(":")
    if sep and prefix:
        namespace: Optional[str] = ctx.prefixes.get(prefix)
        if namespace is not None:
            return namespace + rest
        if _is_absolute(term):
            return term
        raise ContextParseError(f"{source}: unknown prefix '{prefix}' in '{term}'")
    if _is_absolute(term):
        return term
    if ctx.vocab_iri is not None:
        return ctx.vocab_iri + term
    if ctx.base_iri is not None:
        return ctx.base_iri + term
    raise ContextParseError(f"{source}: unqualified term '{term}' with no @vocab or @base")
