# SPDX-License-Identifier: LGPL-2.1-or-later
# vim:ts=4:sw=4:et
#
# Copyright (c) 2024 The pidfile-lock authors
import os
import psutil
import socket
import sys
from typing import Optional

__all__ = [
    'hostname',
    'pid',
    'probe_process',
]

_hostname: Optional[str] = None


def hostname() -> str:
    global _hostname
    if _hostname is None:
        _hostname = socket.gethostname()
    return _hostname


def pid() -> int:
    return os.getpid()


def probe_process(pid: int) -> bool:
    if sys.platform == 'win32':
        # Signal 0 terminates the target on Windows instead of probing it
        return psutil.pid_exists(pid)
    try:
        os.kill(pid, 0)
    except ProcessLookupError:
        return False
    except OSError:
        # EPERM means it exists but belongs to someone else
        return True
    return True
