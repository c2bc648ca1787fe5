# SPDX-License-Identifier: LGPL-2.1-or-later
# vim:ts=4:sw=4:et
#
# Copyright (c) 2024 The pidfile-lock authors
import asyncio
import logging
import os
from types import TracebackType
from typing import Any, BinaryIO, Optional, Type, Union

import pidfile_lock as pfl
from pidfile_lock.constants import DEFAULT_MODE
from pidfile_lock.exceptions import LockContendedError
from pidfile_lock.types import LockOptions

__all__ = [
    'Lockfile',
    'mkpidlock',
    'open_exclusive',
    'try_open_exclusive',
]

logger = logging.getLogger(__name__)


def try_open_exclusive(path: Union[str, os.PathLike], mode: int = DEFAULT_MODE) -> Optional[BinaryIO]:
    try:
        fd = os.open(path, os.O_RDWR | os.O_CREAT | os.O_EXCL | getattr(os, 'O_BINARY', 0), mode)
    except FileExistsError:
        return None
    return os.fdopen(fd, 'r+b', buffering=0)


def _remove_stale(path: Union[str, os.PathLike]) -> None:
    logger.warning(f'Attempting to remove probably stale pidfile {path}')
    try:
        os.unlink(path)
    except FileNotFoundError:
        # Someone else got to it first
        pass
    except OSError as e:
        logger.warning(f'Failed to remove stale pidfile {path}: {e}')


async def open_exclusive(path: Union[str, os.PathLike], options: Optional[LockOptions] = None) -> BinaryIO:
    if options is None:
        options = LockOptions.from_config()

    f = try_open_exclusive(path, options.mode)
    if f is not None:
        return f
    if not options.wait:
        raise LockContendedError(os.fspath(path))

    logger.info(f'Waiting for lock on pidfile {path}')
    stale_age = options.stale_age
    while True:
        # The watch has to be armed before retrying, or a removal in between would be missed
        watcher = asyncio.create_task(pfl.watch.wait_for_change(path, options.poll_interval))
        try:
            f = try_open_exclusive(path, options.mode)
            if f is not None:
                return f
            await watcher
        finally:
            if not watcher.done():
                watcher.cancel()
        if stale_age > 0 and pfl.stale.is_stale(path, stale_age):
            # Only try this once per call, even if the removal fails
            stale_age = 0
            _remove_stale(path)


class Lockfile:
    def __init__(self, path: Union[str, os.PathLike], fd: BinaryIO):
        self.path = os.path.abspath(path)
        self.fd = fd

    def __repr__(self) -> str:
        return f'<Lockfile {self.path} {"closed" if self.closed else "held"}>'

    @property
    def closed(self) -> bool:
        return self.fd.closed

    def close(self) -> bool:
        if self.fd.closed:
            return False
        try:
            try:
                havelock = os.path.samestat(os.fstat(self.fd.fileno()), os.stat(self.path))
            except FileNotFoundError:
                havelock = False
        finally:
            self.fd.close()
        # Don't delete a lock someone else created after ours was broken
        if havelock:
            try:
                os.unlink(self.path)
            except FileNotFoundError:
                # Broken as stale between the check and the unlink
                havelock = False
        if havelock:
            logger.debug(f'Lock on {self.path} released')
        else:
            logger.warning(f'Lock on {self.path} was replaced, not removing it')
        return havelock

    release = close

    def __enter__(self) -> 'Lockfile':
        return self

    def __exit__(self, exc_type: Optional[Type[BaseException]], exc_value: Optional[BaseException], traceback: Optional[TracebackType]) -> bool:
        self.close()
        return not exc_type

    async def __aenter__(self) -> 'Lockfile':
        return self

    async def __aexit__(self, exc_type: Optional[Type[BaseException]], exc_value: Optional[BaseException], traceback: Optional[TracebackType]) -> bool:
        self.close()
        return not exc_type

    def __del__(self) -> None:
        fd = getattr(self, 'fd', None)
        if fd is None or fd.closed:
            return
        try:
            self.close()
        except OSError as e:
            logger.warning(f'Failed to release lock on {self.path} during cleanup: {e}')


async def mkpidlock(path: Union[str, os.PathLike], pid: Optional[int] = None, options: Optional[LockOptions] = None, **overrides: Any) -> Lockfile:
    path = os.path.abspath(path)
    if pid is None:
        pid = pfl.host.pid()
    if options is None:
        options = LockOptions.from_config(**overrides)
    else:
        options = options.replace(**overrides)

    fd = await open_exclusive(path, options)
    try:
        pfl.pidfile.write_pidfile(fd, pid)
    except BaseException:
        fd.close()
        os.unlink(path)
        raise
    logger.debug(f'Lock on {path} obtained')
    return Lockfile(path, fd)
