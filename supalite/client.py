import logging

from supalite import config
from supalite.builder import StatementBuilder
from supalite.database import DatabaseEngine, ThreadedDatabaseEngine, as_executor, run_statement
from supalite.mutations import DeleteBuilder
from supalite.query import QueryBuilder
from supalite.relations import RelationRegistry, RelationResolver
from supalite.schema import BOOKKEEPING_RELATIONS

logger = logging.getLogger("supalite.client")


class Client:
    """Entry point of the fluent API.

    ``database`` is the execution primitive: anything with an
    ``execute(sql, params)`` method, or such a callable itself, returning a
    list of rows either directly or as an awaitable. ``?`` placeholders and
    RETURNING must be supported.

    Every ``from_()`` call returns a fresh builder, so one client can serve
    unrelated queries concurrently.
    """

    def __init__(self, database, relations=None, primary_key=None, strict_relations=None):
        self.database = database
        self._execute = as_executor(database)
        self.primary_key = primary_key or config.primary_key()
        self.statements = StatementBuilder()

        if strict_relations is None and not isinstance(relations, RelationRegistry):
            strict_relations = config.strict_relations()

        if isinstance(relations, RelationRegistry):
            self.relations = relations
            if strict_relations is not None:
                self.relations.strict = strict_relations
        elif relations is None:
            self.relations = RelationRegistry(strict=strict_relations)
        else:
            self.relations = RelationRegistry.from_mapping(relations, strict=strict_relations)

    def from_(self, table_name):
        return QueryBuilder(self, table_name)

    def table(self, table_name):
        return self.from_(table_name)

    def delete(self, table_name):
        return DeleteBuilder(self, table_name)

    def relation_resolver(self):
        return RelationResolver(self.relations, self.run, self.primary_key, self.statements)

    async def run(self, sql, params):
        logger.debug(f"Compiled: {sql} | {params}")
        return await run_statement(self._execute, sql, params)

    async def execute_sql(self, sql, params=None):
        """Raw statement passthrough. Unlike builders, this raises ExecutionError on failure."""
        return await self.run(sql, params or [])


def create_client(db_path=None, relations=None, strict_relations=None, primary_key=None, threaded=False):
    """Client over a sqlite DatabaseEngine, using the bookkeeping relations unless told otherwise."""
    engine = ThreadedDatabaseEngine(db_path) if threaded else DatabaseEngine(db_path)
    if relations is None:
        relations = BOOKKEEPING_RELATIONS
    return Client(engine, relations=relations, strict_relations=strict_relations, primary_key=primary_key)
