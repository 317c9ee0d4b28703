"""
Supalite exception definitions.

Nothing here is raised past an awaited builder: every error ends up in
``APIResponse.error``. The classes exist so callers can tell a bad chain
apart from a failing database.
"""


class SupaliteError(Exception):
    """Base class for every supalite error"""


class QueryCompileError(SupaliteError, ValueError):
    """The call chain cannot be turned into valid SQL"""


class UnsafeIdentifierError(QueryCompileError):
    def __init__(self, identifier):
        self.identifier = identifier
        super().__init__(f"Unsafe SQL identifier: {identifier!r}")


class UnsupportedOperatorError(QueryCompileError):
    def __init__(self, operator):
        self.operator = operator
        super().__init__(f"Unsupported filter operator: {operator!r}")


class MissingFilterError(QueryCompileError):
    """UPDATE/DELETE without any filter and without allow_unfiltered()"""
    def __init__(self, table_name, statement):
        self.table_name = table_name
        self.statement = statement
        super().__init__(
            f"{statement} on '{table_name}' has no filters; "
            f"call allow_unfiltered() to touch every row"
        )


class RelationResolutionError(SupaliteError):
    """Embedded resource whose foreign key cannot be determined"""
    def __init__(self, owner_table, related_table, reason):
        self.owner_table = owner_table
        self.related_table = related_table
        super().__init__(f"Cannot resolve relation {owner_table} -> {related_table}: {reason}")


class ExecutionError(SupaliteError):
    """The execution primitive failed; the original exception is __cause__"""
    def __init__(self, message, sql=None, params=None):
        self.sql = sql
        self.params = params
        super().__init__(message)


class BuilderConsumedError(SupaliteError):
    def __init__(self, table_name):
        self.table_name = table_name
        super().__init__(f"Builder for '{table_name}' was already executed; builders are single-use")
