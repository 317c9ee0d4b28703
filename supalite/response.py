"""
Result shape and the awaitable builder base.

Every builder can be awaited directly; ``await builder`` and
``await builder.execute()`` are the same call. Awaiting runs the chain once
and always resolves to an APIResponse: failures land in ``error``, they are
never raised. Builders are single-use; a second await yields
BuilderConsumedError instead of running the statement again.
"""

import logging
from dataclasses import dataclass
from typing import Any, Optional

from supalite.exceptions import BuilderConsumedError

logger = logging.getLogger("supalite.response")


@dataclass
class APIResponse:
    data: Any = None
    error: Optional[Exception] = None

    def __iter__(self):
        # data, error = await client.from_("invoices").select()
        yield self.data
        yield self.error

    @property
    def ok(self):
        return self.error is None

    def raise_for_error(self):
        if self.error is not None:
            raise self.error
        return self


class BaseBuilder:
    def __init__(self, client, table_name):
        self._client = client
        self.table_name = table_name
        self._executed = False

    def __await__(self):
        return self.execute().__await__()

    async def execute(self) -> APIResponse:
        if self._executed:
            return APIResponse(data=None, error=BuilderConsumedError(self.table_name))
        self._executed = True

        try:
            data = await self._run()
        except Exception as e:
            logger.error(
                f"{type(self).__name__} on '{self.table_name}' failed: {type(e).__name__}: {e}",
                exc_info=logger.isEnabledFor(logging.DEBUG),
            )
            return APIResponse(data=None, error=e)
        return APIResponse(data=data, error=None)

    async def _run(self):
        raise NotImplementedError

    def single(self):
        return SingleQueryBuilder(self)


class SingleQueryBuilder:
    """Wraps a builder and unwraps its list result to the first row or None."""

    def __init__(self, parent):
        self.parent = parent

    def __await__(self):
        return self.execute().__await__()

    def select(self, *columns, count=None):
        self.parent.select(*columns, count=count)
        return self

    async def execute(self) -> APIResponse:
        result = await self.parent.execute()
        data = result.data
        if isinstance(data, list):
            data = data[0] if data else None
        return APIResponse(data=data, error=result.error)
