# SPDX-License-Identifier: LGPL-2.1-or-later
# vim:ts=4:sw=4:et
#
# Copyright (c) 2024 The pidfile-lock authors
import logging
import os
import sys
from typing import Union

import pidfile_lock as pfl
from pidfile_lock.constants import MAX_SIGNED_PID, STALE_AGE_FACTOR

__all__ = [
    'is_plausibly_alive',
    'is_stale',
]

logger = logging.getLogger(__name__)


def is_plausibly_alive(hostname: str, pid: int) -> bool:
    """Conservatively guess whether the process that wrote a pidfile may still be running.

    Anything that can't be checked is assumed to be alive.
    """
    # Can't inspect remote hosts
    if hostname and hostname != pfl.host.hostname():
        return True
    # 0 is never a real owner, and values past the signed range would mean
    # something else entirely when handed to kill
    if pid == 0:
        return False
    if sys.platform != 'win32' and pid > MAX_SIGNED_PID:
        return False
    return pfl.host.probe_process(pid)


def is_stale(path: Union[str, os.PathLike], stale_age: float) -> bool:
    pid, hostname, age = pfl.pidfile.parse_pidfile(path)
    if age < -stale_age:
        logger.warning(f'Filesystem time skew detected on {path}')
    elif age > stale_age:
        if age > stale_age * STALE_AGE_FACTOR or not is_plausibly_alive(hostname, pid):
            return True
    return False
