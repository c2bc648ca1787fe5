# SPDX-License-Identifier: LGPL-2.1-or-later
# vim:ts=4:sw=4:et
#
# Copyright (c) 2024 The pidfile-lock authors
from typing import Final

CONFIG_ENV: Final[str] = 'PIDFILE_LOCK_CONFIG'
BASE_CONFIG_PATH: Final[str] = '/etc/pidfile-lock.cfg'
USER_CONFIG_PATH: Final[str] = '~/.config/pidfile-lock.cfg'

DEFAULT_MODE: Final[int] = 0o444
DEFAULT_POLL_INTERVAL: Final[float] = 10.0
DEFAULT_STALE_AGE: Final[float] = 0.0

# A lock older than stale_age is only broken on age alone once it is this many times older
STALE_AGE_FACTOR: Final[int] = 25

MAX_PID: Final[int] = 0xFFFFFFFF
MAX_SIGNED_PID: Final[int] = 0x7FFFFFFF

WATCH_GRANULARITY: Final[float] = 0.1
