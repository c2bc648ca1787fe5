# SPDX-License-Identifier: LGPL-2.1-or-later
# vim:ts=4:sw=4:et
#
# Copyright (c) 2024 The pidfile-lock authors
import asyncio
import logging
import os
from collections.abc import Awaitable
from typing import Optional, TypeVar, Union

from pidfile_lock.constants import WATCH_GRANULARITY

__all__ = [
    'first_completed',
    'wait_for_change',
    'watch_file',
]

T = TypeVar('T')

logger = logging.getLogger(__name__)


async def first_completed(*aws: Awaitable[T]) -> T:
    tasks = [asyncio.ensure_future(aw) for aw in aws]
    try:
        done, _ = await asyncio.wait(tasks, return_when=asyncio.FIRST_COMPLETED)
    finally:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
    # If several finished together, prefer whichever was passed first
    winner = next(task for task in tasks if task in done)
    return winner.result()


def _identity(path: Union[str, os.PathLike]) -> Optional[tuple[int, int, int]]:
    try:
        st = os.stat(path)
    except FileNotFoundError:
        return None
    return st.st_dev, st.st_ino, st.st_mtime_ns


async def watch_file(path: Union[str, os.PathLike]) -> None:
    """Return once `path` is removed or replaced, or its mtime changes.

    There is no portable change notification for an arbitrary path, so this
    stats the path every `WATCH_GRANULARITY` seconds. That is one cheap
    syscall per tick while suspended on the event loop, never a spin. A
    missing path counts as already changed.
    """
    initial = _identity(path)
    if initial is None:
        return
    while True:
        await asyncio.sleep(WATCH_GRANULARITY)
        if _identity(path) != initial:
            return


async def wait_for_change(path: Union[str, os.PathLike], timeout: float) -> None:
    try:
        await first_completed(watch_file(path), asyncio.sleep(timeout))
    except OSError as e:
        logger.debug(f'Watching {path} failed, falling back to sleeping', exc_info=e)
        await asyncio.sleep(timeout)
