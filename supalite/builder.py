from supalite.filters import compile_where, compile_order, quote_identifier
from supalite.select import compile_columns
from supalite.exceptions import QueryCompileError


class StatementBuilder:
    """Turns builder state into (sql, params) pairs. Holds no state itself."""

    def _quote(self, identifier):
        return quote_identifier(identifier)

    def build_select(self, table_name, columns, filters, order_by=None, limit=None, offset=None):
        where, params = compile_where(filters)
        parts = [f"SELECT {compile_columns(columns)} FROM {self._quote(table_name)}"]
        if where:
            parts.append(where)
        order = compile_order(order_by)
        if order:
            parts.append(order)

        if limit is not None:
            parts.append(f"LIMIT {int(limit)}")
            if offset is not None:
                parts.append(f"OFFSET {int(offset)}")
        elif offset is not None:
            parts.append(f"LIMIT -1 OFFSET {int(offset)}")

        return " ".join(parts), params

    def build_insert(self, table_name, rows, returning="*"):
        values_sql, columns, params = self._values(rows)
        quoted = ", ".join(self._quote(c) for c in columns)
        sql = (f"INSERT INTO {self._quote(table_name)} ({quoted}) VALUES {values_sql} "
               f"RETURNING {compile_columns(returning)}")
        return sql, params

    def build_upsert(self, table_name, rows, conflict_columns, ignore_duplicates=False, returning="*",
                     keep_columns=None):
        if not conflict_columns:
            raise QueryCompileError(f"UPSERT on '{table_name}' needs a conflict target")
        values_sql, columns, params = self._values(rows)
        quoted = ", ".join(self._quote(c) for c in columns)
        target = ", ".join(self._quote(c) for c in conflict_columns)

        # never rewrite the columns the conflict was detected on
        keep = set(conflict_columns) | set(keep_columns or ())
        update_cols = [c for c in columns if c not in keep]
        if ignore_duplicates or not update_cols:
            action = "DO NOTHING"
        else:
            assignments = ", ".join(f"{self._quote(c)} = EXCLUDED.{self._quote(c)}" for c in update_cols)
            action = f"DO UPDATE SET {assignments}"

        sql = (f"INSERT INTO {self._quote(table_name)} ({quoted}) VALUES {values_sql} "
               f"ON CONFLICT ({target}) {action} RETURNING {compile_columns(returning)}")
        return sql, params

    def build_update(self, table_name, data, filters, returning="*"):
        if not data:
            raise QueryCompileError(f"UPDATE on '{table_name}' has no columns to set")
        set_parts = []
        params = []
        for col, val in data.items():
            set_parts.append(f"{self._quote(col)} = ?")
            params.append(val)

        where, where_params = compile_where(filters)
        params.extend(where_params)
        sql = f"UPDATE {self._quote(table_name)} SET {', '.join(set_parts)}"
        if where:
            sql += f" {where}"
        sql += f" RETURNING {compile_columns(returning)}"
        return sql, params

    def build_delete(self, table_name, filters):
        where, params = compile_where(filters)
        sql = f"DELETE FROM {self._quote(table_name)}"
        if where:
            sql += f" {where}"
        return sql, params

    def build_related_select(self, table_name, columns, key_column, keys):
        """Batched lookup used by the relationship resolver: one query for all parents."""
        if columns.strip() == "*":
            select_cols = "*"
        else:
            select_cols = f"{self._quote(key_column)}, {compile_columns(columns)}"
        placeholders = ", ".join("?" for _ in keys)
        sql = (f"SELECT {select_cols} FROM {self._quote(table_name)} "
               f"WHERE {self._quote(key_column)} IN ({placeholders})")
        return sql, list(keys)

    def _values(self, rows):
        columns = []
        for row in rows:
            for key in row:
                if key not in columns:
                    columns.append(key)
        if not columns:
            raise QueryCompileError("Cannot insert rows without any columns")

        params = []
        value_rows = []
        for row in rows:
            params.extend(row.get(col) for col in columns)
            value_rows.append("(" + ", ".join("?" for _ in columns) + ")")
        return ", ".join(value_rows), columns, params
