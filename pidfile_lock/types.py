# SPDX-License-Identifier: LGPL-2.1-or-later
# vim:ts=4:sw=4:et
#
# Copyright (c) 2024 The pidfile-lock authors
import dataclasses
from typing import Any, Self

import pidfile_lock as pfl
from pidfile_lock.constants import DEFAULT_MODE, DEFAULT_POLL_INTERVAL, DEFAULT_STALE_AGE
from pidfile_lock.exceptions import InvalidArgumentsError


@dataclasses.dataclass(frozen=True)
class LockOptions:
    """Settings for a single attempt at taking a pidfile lock.

    mode: permission bits of the created pidfile, before the process umask is applied.
    poll_interval: longest time, in seconds, between attempts when no change is seen.
    stale_age: seconds after which an existing pidfile may be broken; 0 disables this.
    wait: block until the lock is available instead of failing on contention.
    """
    mode: int = DEFAULT_MODE
    poll_interval: float = DEFAULT_POLL_INTERVAL
    stale_age: float = DEFAULT_STALE_AGE
    wait: bool = True

    def __post_init__(self) -> None:
        if not 0 <= self.mode <= 0o7777:
            raise InvalidArgumentsError(f'Invalid file mode {self.mode:#o}')
        if self.poll_interval <= 0:
            raise InvalidArgumentsError(f'Poll interval must be positive, got {self.poll_interval}')
        if self.stale_age < 0:
            raise InvalidArgumentsError(f'Stale age must not be negative, got {self.stale_age}')

    def replace(self, **overrides: Any) -> Self:
        return dataclasses.replace(self, **{k: v for k, v in overrides.items() if v is not None})

    @classmethod
    def from_config(cls, **overrides: Any) -> Self:
        section = pfl.config.get_config('pidfile_lock.lockfile')
        try:
            options = cls(mode=int(section.get('mode', oct(DEFAULT_MODE)), 8),
                          poll_interval=float(section.get('poll-interval', str(DEFAULT_POLL_INTERVAL))),
                          stale_age=float(section.get('stale-age', str(DEFAULT_STALE_AGE))),
                          wait=section.get('wait', 'on') == 'on')
        except ValueError as e:
            raise InvalidArgumentsError(f'Invalid lockfile configuration: {e}') from e
        return options.replace(**overrides)
