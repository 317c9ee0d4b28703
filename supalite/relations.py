"""
Embedded resource resolution.

A select such as ``"*, customers(name)"`` on ``invoices`` is answered with
one query for the invoices and one batched query per relation. The
relation direction comes from the RelationRegistry, or, for pairs nobody
registered, from column naming:

    invoices.customer_id exists     -> invoices belongs to customers
    otherwise                       -> invoice_items.invoice_id (has many)

Inference is a fallback. Register relations explicitly whenever table names
pluralise irregularly, and pass ``strict=True`` to refuse unregistered pairs.
"""

import logging
from enum import Enum

from pydantic import BaseModel, ConfigDict, field_validator

from supalite.builder import StatementBuilder
from supalite.exceptions import RelationResolutionError
from supalite.filters import quote_identifier

logger = logging.getLogger("supalite.relations")


class RelationKind(str, Enum):
    BELONGS_TO = "belongs_to"
    HAS_MANY = "has_many"


class Relation(BaseModel):
    model_config = ConfigDict(frozen=True)

    foreign_key: str
    kind: RelationKind

    @field_validator("foreign_key")
    @classmethod
    def _safe_foreign_key(cls, value):
        quote_identifier(value)
        return value


def singularize(table_name):
    if table_name.endswith("ies") and len(table_name) > 3:
        return table_name[:-3] + "y"
    if table_name.endswith("s") and not table_name.endswith("ss"):
        return table_name[:-1]
    return table_name


class RelationRegistry:
    def __init__(self, strict=False):
        self.strict = strict
        self._relations = {}

    def __len__(self):
        return len(self._relations)

    def __contains__(self, pair):
        return pair in self._relations

    def register(self, owner_table, related_table, foreign_key, kind):
        relation = Relation(foreign_key=foreign_key, kind=kind)
        self._relations[(owner_table, related_table)] = relation
        return relation

    @classmethod
    def from_mapping(cls, mapping, strict=False):
        """Build from {owner: {related: {"fk": column, "type": "belongs_to"|"has_many"}}}"""
        registry = cls(strict=strict)
        for owner_table, related in mapping.items():
            for related_table, entry in related.items():
                registry.register(owner_table, related_table, entry["fk"], entry["type"])
        return registry

    def get(self, owner_table, related_table):
        return self._relations.get((owner_table, related_table))

    def resolve(self, owner_table, related_table, sample_row):
        relation = self.get(owner_table, related_table)
        if relation is not None:
            return relation
        return self.infer(owner_table, related_table, sample_row)

    def infer(self, owner_table, related_table, sample_row):
        if self.strict:
            raise RelationResolutionError(owner_table, related_table, "relation is not registered")

        owner_singular = singularize(owner_table)
        related_singular = singularize(related_table)
        if owner_singular == related_singular:
            raise RelationResolutionError(
                owner_table, related_table,
                f"both tables singularize to '{owner_singular}'; register the relation explicitly",
            )

        belongs_fk = f"{related_singular}_id"
        if belongs_fk in sample_row:
            relation = Relation(foreign_key=belongs_fk, kind=RelationKind.BELONGS_TO)
        else:
            relation = Relation(foreign_key=f"{owner_singular}_id", kind=RelationKind.HAS_MANY)
        logger.debug(f"Inferred {owner_table} -> {related_table}: {relation.kind.value} on {relation.foreign_key}")
        return relation


class RelationResolver:
    """Splices related rows onto already fetched parent rows, one batched query per relation."""

    def __init__(self, registry, run, primary_key="id", statements=None):
        self.registry = registry
        self.run = run
        self.primary_key = primary_key
        self.statements = statements or StatementBuilder()

    async def resolve(self, owner_table, rows, request):
        if not rows:
            return

        relation = self.registry.resolve(owner_table, request.related_table, rows[0])
        key_column = relation.foreign_key if relation.kind == RelationKind.BELONGS_TO else self.primary_key
        if key_column not in rows[0]:
            raise RelationResolutionError(
                owner_table, request.related_table, f"parent rows were selected without the '{key_column}' column"
            )

        if relation.kind == RelationKind.BELONGS_TO:
            await self._fetch_belongs_to(rows, request, relation.foreign_key)
        else:
            await self._fetch_has_many(rows, request, relation.foreign_key)

    async def _fetch_belongs_to(self, rows, request, fk_column):
        field = request.related_table
        fk_values = _distinct(row.get(fk_column) for row in rows)

        if not fk_values:
            for row in rows:
                row[field] = None
        else:
            sql, params = self.statements.build_related_select(
                request.related_table, request.columns, self.primary_key, fk_values
            )
            related = await self.run(sql, params)
            related_map = {str(r.get(self.primary_key)): r for r in related}
            for row in rows:
                fk_val = row.get(fk_column)
                row[field] = related_map.get(str(fk_val)) if fk_val is not None else None

        if request.inner_join:
            # slice assignment keeps the caller's list object and the survivors' order
            rows[:] = [row for row in rows if row[field] is not None]

    async def _fetch_has_many(self, rows, request, fk_column):
        field = request.related_table
        ids = _distinct(row.get(self.primary_key) for row in rows)

        if not ids:
            for row in rows:
                row[field] = []
            return

        sql, params = self.statements.build_related_select(request.related_table, request.columns, fk_column, ids)
        related = await self.run(sql, params)

        groups = {}
        for r in related:
            groups.setdefault(str(r.get(fk_column)), []).append(r)
        for row in rows:
            row[field] = groups.get(str(row.get(self.primary_key)), [])


def _distinct(values):
    return list(dict.fromkeys(v for v in values if v is not None))
