"""Best-effort runner for post-commit bookkeeping.

Notifications, activity entries and status history are written after the
primary change has been committed. Each one runs inside its own SAVEPOINT so
a failure rolls back only that write; the error is logged and dropped.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Iterable, List

from sqlalchemy.ext.asyncio import AsyncSession

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SideEffect:
    name: str
    action: Callable[[], Awaitable[object]]


async def run_best_effort(db: AsyncSession, effects: Iterable[SideEffect]) -> List[str]:
    """Run every effect independently and commit the ones that succeeded.

    Returns the names of the effects that failed.
    """
    effects = list(effects)
    failed: List[str] = []
    for effect in effects:
        try:
            async with db.begin_nested():
                await effect.action()
        except Exception:
            logger.warning("Side effect '%s' failed; primary change kept", effect.name, exc_info=True)
            failed.append(effect.name)

    try:
        await db.commit()
    except Exception:
        logger.exception("Could not commit side effects")
        await db.rollback()
        failed = [effect.name for effect in effects]
    return failed
