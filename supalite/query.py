import logging

from supalite.filters import FilterMixin, OrderSpec, has_empty_in
from supalite.mutations import DeleteBuilder, InsertBuilder, UpdateBuilder, UpsertBuilder
from supalite.response import BaseBuilder, SingleQueryBuilder
from supalite.relations import RelationKind
from supalite.select import column_names, parse_select

logger = logging.getLogger("supalite.query")


class QueryBuilder(FilterMixin, BaseBuilder):
    """Fluent SELECT over one table, created by Client.from_().

    client.from_("invoices").select("*, customers(name)").eq("status", "sent").order("due_date")

    insert/update/upsert/delete hand the chain over to a mutation builder;
    filters already added travel along to update and delete.
    """

    def __init__(self, client, table_name):
        super().__init__(client, table_name)
        self._columns = "*"
        self._filters = []
        self._orders = []
        self._limit = None
        self._offset = None

    def select(self, *columns, count=None):
        """select("id, total"), select("id", "total") and select() for every column.

        count is accepted for call compatibility; row counts are not computed.
        """
        if count is not None:
            logger.debug(f"Ignoring count={count!r} on '{self.table_name}'")
        self._columns = ", ".join(columns) or "*"
        return self

    def order(self, column, desc=False):
        self._orders.append(OrderSpec(column, "DESC" if desc else "ASC"))
        return self

    def limit(self, count):
        self._limit = count
        return self

    def range(self, start, end):
        """Rows start..end inclusive, zero based"""
        self._offset = start
        self._limit = max(end - start + 1, 0)
        return self

    def single(self):
        self._limit = 1
        return SingleQueryBuilder(self)

    def insert(self, data):
        return InsertBuilder(self._client, self.table_name, data)

    def update(self, data):
        return UpdateBuilder(self._client, self.table_name, data, filters=self._filters)

    def upsert(self, data, on_conflict=None, ignore_duplicates=False):
        return UpsertBuilder(self._client, self.table_name, data, on_conflict, ignore_duplicates)

    def delete(self):
        return DeleteBuilder(self._client, self.table_name, filters=self._filters)

    async def _run(self):
        parsed = parse_select(self._columns)
        if has_empty_in(self._filters):
            logger.debug(f"Empty IN filter on '{self.table_name}', returning no rows")
            return []

        base_columns, key_columns = self._with_key_columns(parsed)
        sql, params = self._client.statements.build_select(
            self.table_name, base_columns, self._filters,
            order_by=self._orders, limit=self._limit, offset=self._offset,
        )
        rows = await self._client.run(sql, params)

        # one relation at a time; an inner join may drop rows before the next runs
        resolver = self._client.relation_resolver()
        for request in parsed.relations:
            await resolver.resolve(self.table_name, rows, request)

        for row in rows:
            for column in key_columns:
                row.pop(column, None)
        return rows

    def _with_key_columns(self, parsed):
        """Add the join keys registered relations need to an explicit column list.

        Returns the column list to query and the keys that were added, which
        are dropped from the rows again once the relations are resolved.
        """
        selected = column_names(parsed.base_columns)
        if "*" in selected or not parsed.relations:
            return parsed.base_columns, []

        added = []
        for request in parsed.relations:
            relation = self._client.relations.get(self.table_name, request.related_table)
            if relation is None:
                continue
            if relation.kind == RelationKind.BELONGS_TO:
                key = relation.foreign_key
            else:
                key = self._client.primary_key
            if key not in selected and key not in added:
                added.append(key)
        return ", ".join(selected + added), added
