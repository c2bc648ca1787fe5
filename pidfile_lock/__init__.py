# SPDX-License-Identifier: LGPL-2.1-or-later
# vim:ts=4:sw=4:et
#
# Copyright (c) 2024 The pidfile-lock authors
import pidfile_lock.config as config
import pidfile_lock.constants as constants
import pidfile_lock.exceptions as exceptions
import pidfile_lock.host as host
import pidfile_lock.logging as logging
import pidfile_lock.pidfile as pidfile
import pidfile_lock.stale as stale
import pidfile_lock.types as types
import pidfile_lock.watch as watch
import pidfile_lock.lockfile as lockfile

import asyncio
import os
from typing import Any, Optional, Union

from pidfile_lock.exceptions import InvalidArgumentsError, LockContendedError
from pidfile_lock.lockfile import Lockfile, mkpidlock, open_exclusive, try_open_exclusive
from pidfile_lock.pidfile import ParsedPidfile, decode, encode, parse_pidfile
from pidfile_lock.stale import is_plausibly_alive, is_stale
from pidfile_lock.types import LockOptions

__all__ = [
    # Types
    'InvalidArgumentsError',
    'LockContendedError',
    'LockOptions',
    'Lockfile',
    'ParsedPidfile',
    # Functions
    'decode',
    'encode',
    'is_plausibly_alive',
    'is_stale',
    'lock',
    'mkpidlock',
    'open_exclusive',
    'parse_pidfile',
    'release',
    'try_open_exclusive',
    # Submodules
    'config',
    'constants',
    'exceptions',
    'host',
    'lockfile',
    'logging',
    'pidfile',
    'stale',
    'types',
    'watch',
]
__version__ = '0.1.0'


def lock(path: Union[str, os.PathLike], pid: Optional[int] = None, **overrides: Any) -> Lockfile:
    return asyncio.run(lockfile.mkpidlock(path, pid, **overrides))


def release(handle: Lockfile) -> bool:
    return handle.close()
