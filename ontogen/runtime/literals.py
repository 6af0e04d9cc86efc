"""
ontogen.runtime.literals — Convert between RDF literals and Python values.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Optional

from rdflib import Literal, URIRef, XSD

logger = logging.getLogger(__name__)

# XSD lexical grammars, stricter than int() and float()
_XSD_INTEGER = re.compile(r"[+-]?[0-9]+")
_XSD_DECIMAL_OR_DOUBLE = re.compile(r"[+-]?([0-9]+(\.[0-9]*)?|\.[0-9]+)([eE][+-]?[0-9]+)?")
_XSD_SPECIAL_FLOATS = {"INF": float("inf"), "+INF": float("inf"), "-INF": float("-inf"), "NaN": float("nan")}

XSD_STRING = str(XSD.string)


class LangString(str):
    """A string read from a language-tagged literal.

    Compares equal to the plain string; the tag is kept in ``lang``.
    """

    def __new__(cls, value: str, lang: Optional[str] = None):
        obj = super().__new__(cls, value)
        obj.lang = lang
        return obj

    def __repr__(self) -> str:
        return f"LangString({str.__repr__(self)}, lang={self.lang!r})"


def _parse_int(lexical: str) -> int:
    if not _XSD_INTEGER.fullmatch(lexical):
        raise ValueError(f"invalid integer lexical form '{lexical}'")
    return int(lexical)


def _parse_float(lexical: str) -> float:
    if lexical in _XSD_SPECIAL_FLOATS:
        return _XSD_SPECIAL_FLOATS[lexical]
    if not _XSD_DECIMAL_OR_DOUBLE.fullmatch(lexical):
        raise ValueError(f"invalid floating-point lexical form '{lexical}'")
    return float(lexical)


def _parse_bool(lexical: str) -> bool:
    if lexical in ("true", "1"):
        return True
    if lexical in ("false", "0"):
        return False
    raise ValueError(f"invalid boolean lexical form '{lexical}'")


_PARSERS = {
    "int": _parse_int,
    "float": _parse_float,
    "bool": _parse_bool,
}


def parse_lexical(lexical: str, value_type: str) -> Any:
    """Parse a lexical form into value_type. Raises ValueError if malformed."""
    parser = _PARSERS.get(value_type)
    if parser is None:
        return lexical
    return parser(lexical)


def from_literal(term, value_type: str) -> Any:
    """Return the Python value of a literal term, or None if it is not one or is malformed."""
    if not isinstance(term, Literal):
        return None
    lexical = str(term)
    if value_type == "str":
        if term.language:
            return LangString(lexical, term.language)
        return lexical
    try:
        return parse_lexical(lexical, value_type)
    except ValueError:
        logger.debug("Skipping malformed %s literal '%s'", value_type, lexical)
        return None


def lexical_form(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def to_literal(value: Any, datatype: Optional[str] = None, lang: Optional[str] = None) -> Literal:
    """Build the literal for a builder value.

    A language tag yields a tagged literal; strings without one are plain
    literals; everything else carries its declared datatype.
    """
    if lang is not None:
        return Literal(lexical_form(value), lang=lang)
    if datatype is None or datatype == XSD_STRING:
        return Literal(lexical_form(value))
    return Literal(lexical_form(value), datatype=URIRef(datatype))
