# Supalite - hosted-Postgres style query builder over plain SQL
from supalite.client import Client, create_client
from supalite.database import DatabaseEngine, ThreadedDatabaseEngine
from supalite.query import QueryBuilder
from supalite.relations import RelationKind, RelationRegistry
from supalite.response import APIResponse
from supalite.exceptions import (
    SupaliteError, QueryCompileError, UnsafeIdentifierError, UnsupportedOperatorError,
    MissingFilterError, RelationResolutionError, ExecutionError, BuilderConsumedError,
)

__version__ = "0.1.0"
__all__ = [
    "Client", "create_client", "DatabaseEngine", "ThreadedDatabaseEngine", "QueryBuilder", "RelationKind", "RelationRegistry",
    "APIResponse", "SupaliteError", "QueryCompileError", "UnsafeIdentifierError",
    "UnsupportedOperatorError", "MissingFilterError", "RelationResolutionError", "ExecutionError",
    "BuilderConsumedError",
]
