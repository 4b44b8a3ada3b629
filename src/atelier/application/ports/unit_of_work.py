"""Unit of work port.

``sqlalchemy.ext.asyncio.AsyncSession`` satisfies this protocol.
"""

from typing import Protocol


class UnitOfWork(Protocol):
    async def commit(self) -> None: ...

    async def rollback(self) -> None: ...
