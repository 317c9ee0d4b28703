"""
Parser for select expressions such as

    "id, total, customers(name, email), invoice_items!inner(*)"

Relation sub-expressions may appear anywhere in the top-level list. What is
left once they are removed is the base column list ("*" when empty).
"""

import re

from supalite.filters import quote_identifier

_RELATION_PATTERN = re.compile(r'(\w+)\s*(!inner)?\s*\(([^)]*)\)')


class RelationRequest:
    def __init__(self, related_table, columns="*", inner_join=False):
        self.related_table = related_table
        self.columns = columns
        self.inner_join = inner_join

    def __repr__(self):
        join = "!inner" if self.inner_join else ""
        return f"<RelationRequest {self.related_table}{join}({self.columns})>"


class ParsedSelect:
    def __init__(self, base_columns="*", relations=None):
        self.base_columns = base_columns
        self.relations = relations or []

    def __repr__(self):
        return f"<ParsedSelect base={self.base_columns!r} relations={self.relations}>"


def parse_select(select_expr):
    relations = []
    for match in _RELATION_PATTERN.finditer(select_expr or ""):
        relations.append(RelationRequest(
            related_table=match.group(1),
            columns=_normalize_columns(match.group(3)),
            inner_join=match.group(2) is not None,
        ))

    remainder = _RELATION_PATTERN.sub("", select_expr or "")
    return ParsedSelect(_normalize_columns(remainder), relations)


def _normalize_columns(text):
    parts = [p.strip() for p in text.split(",")]
    parts = [p for p in parts if p]
    return ", ".join(parts) if parts else "*"


def compile_columns(columns):
    """Quote a comma separated column list; "*" passes through."""
    parts = [p.strip() for p in columns.split(",") if p.strip()]
    if not parts:
        return "*"
    return ", ".join("*" if p == "*" else quote_identifier(p) for p in parts)


def column_names(columns):
    return [p.strip() for p in columns.split(",") if p.strip()]
