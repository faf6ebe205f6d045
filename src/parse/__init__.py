"""Parsing utilities for Python log call sites."""

from parse.expressions import (
    Concatenation,
    Fragment,
    Identifier,
    Literal,
    MessageExpr,
    Opaque,
    extract_fragments,
    extract_terms,
    join_terms,
)
from parse.name_resolution import build_name_table, build_scoped_names
from parse.treesitter_calls import parse_source, parse_unit

__all__ = [
    "Concatenation",
    "Fragment",
    "Identifier",
    "Literal",
    "MessageExpr",
    "Opaque",
    "build_name_table",
    "build_scoped_names",
    "extract_fragments",
    "extract_terms",
    "join_terms",
    "parse_source",
    "parse_unit",
]
