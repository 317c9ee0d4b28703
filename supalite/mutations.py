"""
INSERT / UPDATE / UPSERT / DELETE builders.

Rows without a primary key value get a generated uuid4 string. Multi-row
writes are a single statement, so a failing row fails the whole write.
UPDATE and DELETE refuse to run without filters unless the caller opts in
with allow_unfiltered().
"""

import logging
import uuid

from supalite.exceptions import MissingFilterError, QueryCompileError
from supalite.filters import FilterMixin, has_empty_in
from supalite.response import BaseBuilder
from supalite.select import column_names

logger = logging.getLogger("supalite.mutations")


def normalize_rows(table_name, data):
    if isinstance(data, dict):
        return [dict(data)]
    if isinstance(data, (list, tuple)):
        rows = []
        for row in data:
            if not isinstance(row, dict):
                raise QueryCompileError(f"Rows for '{table_name}' must be dicts, got {type(row).__name__}")
            rows.append(dict(row))
        return rows
    raise QueryCompileError(f"Rows for '{table_name}' must be a dict or a list of dicts")


def fill_primary_keys(rows, primary_key):
    """Give every row lacking a primary key a fresh uuid4. Returns True if any was generated."""
    generated = False
    for row in rows:
        if row.get(primary_key) in (None, ""):
            row[primary_key] = str(uuid.uuid4())
            generated = True
    return generated


class InsertBuilder(BaseBuilder):
    def __init__(self, client, table_name, data):
        super().__init__(client, table_name)
        self._data = data
        self._returning = "*"

    def select(self, *columns, count=None):
        self._returning = ", ".join(columns) or "*"
        return self

    async def _run(self):
        rows = normalize_rows(self.table_name, self._data)
        if not rows:
            return []
        fill_primary_keys(rows, self._client.primary_key)
        sql, params = self._client.statements.build_insert(self.table_name, rows, self._returning)
        return await self._client.run(sql, params)


class UpsertBuilder(BaseBuilder):
    def __init__(self, client, table_name, data, on_conflict=None, ignore_duplicates=False):
        super().__init__(client, table_name)
        self._data = data
        self._on_conflict = on_conflict
        self._ignore_duplicates = ignore_duplicates
        self._returning = "*"

    def select(self, *columns, count=None):
        self._returning = ", ".join(columns) or "*"
        return self

    async def _run(self):
        rows = normalize_rows(self.table_name, self._data)
        if not rows:
            return []

        primary_key = self._client.primary_key
        conflict_columns = column_names(self._on_conflict or primary_key)
        generated = fill_primary_keys(rows, primary_key)

        keep = list(conflict_columns)
        if generated and primary_key not in keep:
            # a generated key must not replace the key of the row being updated
            keep.append(primary_key)

        sql, params = self._client.statements.build_upsert(
            self.table_name, rows, conflict_columns,
            ignore_duplicates=self._ignore_duplicates,
            returning=self._returning,
            keep_columns=keep,
        )
        return await self._client.run(sql, params)


class _FilteredMutation(FilterMixin, BaseBuilder):
    statement = None

    def __init__(self, client, table_name, filters=None):
        super().__init__(client, table_name)
        self._filters = list(filters or [])
        self._allow_unfiltered = False

    def allow_unfiltered(self):
        """Explicitly permit a statement that touches every row of the table"""
        self._allow_unfiltered = True
        return self

    def _check_filters(self):
        if self._filters:
            return
        if not self._allow_unfiltered:
            raise MissingFilterError(self.table_name, self.statement)
        logger.warning(f"Unfiltered {self.statement} on '{self.table_name}'")


class UpdateBuilder(_FilteredMutation):
    statement = "UPDATE"

    def __init__(self, client, table_name, data, filters=None):
        super().__init__(client, table_name, filters)
        self._data = data
        self._returning = "*"

    def select(self, *columns, count=None):
        self._returning = ", ".join(columns) or "*"
        return self

    async def _run(self):
        if not isinstance(self._data, dict):
            raise QueryCompileError(f"UPDATE on '{self.table_name}' expects a dict of column values")
        self._check_filters()
        if has_empty_in(self._filters):
            return []
        sql, params = self._client.statements.build_update(
            self.table_name, dict(self._data), self._filters, self._returning
        )
        return await self._client.run(sql, params)


class DeleteBuilder(_FilteredMutation):
    statement = "DELETE"

    async def _run(self):
        self._check_filters()
        if has_empty_in(self._filters):
            return None
        sql, params = self._client.statements.build_delete(self.table_name, self._filters)
        await self._client.run(sql, params)
        return None
