"""
Filter conditions and the WHERE clause compiler.

Conditions are kept in call order and ANDed together. There is no OR and no
parenthesised grouping: a chain can only narrow the row set.
"""

import re

from supalite.exceptions import QueryCompileError, UnsafeIdentifierError, UnsupportedOperatorError

_SAFE_IDENT_PATTERN = re.compile(r'^[a-zA-Z_][a-zA-Z0-9_]*$')

# hosted client operator name -> SQL operator
OPERATORS = {
    "eq": "=",
    "neq": "!=",
    "gt": ">",
    "gte": ">=",
    "lt": "<",
    "lte": "<=",
    "like": "LIKE",
    # sqlite LIKE is already case-insensitive for ASCII
    "ilike": "LIKE",
    "in": "IN",
    "is": "IS",
}

COMPARISON_OPERATORS = ("=", "!=", ">", ">=", "<", "<=", "LIKE")


def quote_identifier(identifier):
    if not identifier or not _SAFE_IDENT_PATTERN.match(str(identifier)):
        raise UnsafeIdentifierError(identifier)
    return f'"{identifier}"'


class FilterCondition:
    def __init__(self, column, value, operator):
        self.column = column
        self.value = value
        self.operator = operator

    def __repr__(self):
        return f"<FilterCondition {self.column} {self.operator} {self.value!r}>"


class OrderSpec:
    def __init__(self, column, direction="ASC"):
        self.column = column
        self.direction = direction

    def __repr__(self):
        return f"<OrderSpec {self.column} {self.direction}>"


def has_empty_in(conditions):
    """True when an IN condition can never match, so the statement must not run"""
    return any(c.operator == "IN" and _is_sequence(c.value) and len(c.value) == 0 for c in conditions)


def compile_where(conditions):
    """Compile conditions into ("WHERE ...", values).

    Placeholders are emitted in the same left-to-right order as the bound
    values. An empty condition list gives ("", []).
    """
    if not conditions:
        return "", []

    clauses = []
    values = []
    for cond in conditions:
        clause, bound = _compile_condition(cond.column, cond.operator, cond.value)
        clauses.append(clause)
        values.extend(bound)
    return "WHERE " + " AND ".join(clauses), values


def compile_order(orders):
    if not orders:
        return ""
    parts = []
    for item in orders:
        if item.direction not in ("ASC", "DESC"):
            raise QueryCompileError(f"Invalid sort direction: {item.direction!r}")
        parts.append(f"{quote_identifier(item.column)} {item.direction}")
    return "ORDER BY " + ", ".join(parts)


def _compile_condition(column, operator, value):
    col = quote_identifier(column)

    # IS tests nullity only: a non-null argument means IS NOT NULL
    if operator == "IS":
        return f"{col} IS {'NULL' if value is None else 'NOT NULL'}", []
    if operator == "IS NOT":
        return f"{col} IS NOT NULL", []

    if operator == "IN":
        items = _in_values(column, value)
        if not items:
            raise QueryCompileError(f"IN on '{column}' with an empty list cannot be compiled")
        placeholders = ", ".join("?" for _ in items)
        return f"{col} IN ({placeholders})", items

    if operator.startswith("NOT "):
        inner = operator[4:]
        if inner == "IN" and not _in_values(column, value):
            return "1 = 1", []
        if inner != "IN" and inner != "IS" and inner not in COMPARISON_OPERATORS:
            raise UnsupportedOperatorError(operator)
        clause, bound = _compile_condition(column, inner, value)
        return f"NOT ({clause})", bound

    if operator not in COMPARISON_OPERATORS:
        raise UnsupportedOperatorError(operator)
    return f"{col} {operator} ?", [value]


def _is_sequence(value):
    return isinstance(value, (list, tuple, set, frozenset))


def _in_values(column, value):
    if not _is_sequence(value):
        raise QueryCompileError(f"IN on '{column}' expects a list of values, got {type(value).__name__}")
    return list(value)


class FilterMixin:
    """Chainable filter methods shared by every builder that has a WHERE clause.

    Each call appends one FilterCondition and returns the builder. Nothing is
    validated here; bad columns or operators surface when the chain runs.
    """

    def _add_filter(self, column, value, operator):
        self._filters.append(FilterCondition(column, value, operator))
        return self

    def eq(self, column, value):
        return self._add_filter(column, value, "=")

    def neq(self, column, value):
        return self._add_filter(column, value, "!=")

    def gt(self, column, value):
        return self._add_filter(column, value, ">")

    def gte(self, column, value):
        return self._add_filter(column, value, ">=")

    def lt(self, column, value):
        return self._add_filter(column, value, "<")

    def lte(self, column, value):
        return self._add_filter(column, value, "<=")

    def like(self, column, pattern):
        return self._add_filter(column, pattern, "LIKE")

    def ilike(self, column, pattern):
        return self._add_filter(column, pattern, "LIKE")

    def is_(self, column, value):
        return self._add_filter(column, value, "IS")

    def in_(self, column, values):
        return self._add_filter(column, values, "IN")

    def not_(self, column, operator, value):
        """Negate one hosted-client operator, e.g. not_("status", "eq", "paid")"""
        if operator == "is" and value is None:
            return self._add_filter(column, None, "IS NOT")
        sql_op = OPERATORS.get(operator, str(operator).upper())
        return self._add_filter(column, value, f"NOT {sql_op}")

    def filter(self, column, operator, value):
        """Generic form: filter("total", "gte", 100)"""
        return self._add_filter(column, value, OPERATORS.get(operator, str(operator).upper()))

    def match(self, query):
        for column, value in query.items():
            self.eq(column, value)
        return self
