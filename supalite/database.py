import asyncio
import inspect
import sqlite3
import logging
import threading

from supalite import config
from supalite.exceptions import ExecutionError, SupaliteError


class DatabaseEngine:
    """sqlite3 execution primitive: execute(sql, params) -> list of row dicts.

    The connection runs in autocommit mode, so every statement issued by a
    builder is applied on its own.

    execute() is synchronous: awaiting a builder over this engine blocks the
    event loop for the duration of each statement. Use ThreadedDatabaseEngine
    when other tasks must keep running meanwhile.

    Log output goes to the "supalite.database" logger and is left to the
    application to configure (see config.configure_logging).
    """
    logger = logging.getLogger("supalite.database")

    def __init__(self, db_path=None, check_same_thread=True):
        self.db_path = db_path or config.database_path()
        self.connection = sqlite3.connect(self.db_path, isolation_level=None, check_same_thread=check_same_thread)
        self.connection.row_factory = sqlite3.Row

    def _log(self, sql, params=None):
        msg = f"[SQL EXECUTE]: {sql}"
        if params:
            msg += f" | [PARAMS]: {params}"
        self.logger.info(msg)

    def execute(self, sql, params=None):
        self._log(sql, params)
        cursor = self.connection.cursor()
        try:
            cursor.execute(sql, tuple(params or ()))
            return [dict(row) for row in cursor.fetchall()]
        finally:
            cursor.close()

    def executescript(self, script):
        self._log(script)
        self.connection.executescript(script)

    def close(self):
        self.connection.close()


class ThreadedDatabaseEngine(DatabaseEngine):
    """DatabaseEngine whose execute() runs in a worker thread and must be awaited.

    Statements are serialised on one connection, so their order is the order
    in which they were awaited.
    """

    def __init__(self, db_path=None):
        super().__init__(db_path, check_same_thread=False)
        self._lock = threading.Lock()

    def _execute_locked(self, sql, params):
        with self._lock:
            return DatabaseEngine.execute(self, sql, params)

    async def execute(self, sql, params=None):
        return await asyncio.to_thread(self._execute_locked, sql, params)

    def execute_blocking(self, sql, params=None):
        """Synchronous execute, for schema setup outside an event loop"""
        return self._execute_locked(sql, params)

    def executescript(self, script):
        with self._lock:
            super().executescript(script)


def as_executor(database):
    """Accept an object with an execute method or a bare execute(sql, params) callable."""
    execute = getattr(database, "execute", database)
    if not callable(execute):
        raise TypeError(f"{database!r} is not an execution primitive")
    return execute


async def run_statement(execute, sql, params):
    """Run one statement through a sync or async primitive and normalise the rows to dicts."""
    try:
        result = execute(sql, list(params))
        if inspect.isawaitable(result):
            result = await result
    except SupaliteError:
        raise
    except Exception as e:
        raise ExecutionError(str(e), sql=sql, params=list(params)) from e
    return [dict(row) for row in result or []]
