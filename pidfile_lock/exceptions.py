# SPDX-License-Identifier: LGPL-2.1-or-later
# vim:ts=4:sw=4:et
#
# Copyright (c) 2024 The pidfile-lock authors
from typing import Optional


class Error(RuntimeError):
    def __init__(self, data: Optional[str] = None):
        if data:
            super().__init__(data)
        else:
            super().__init__()
        self.data = data


class InvalidArgumentsError(Error):
    pass


class LockContendedError(Error):
    """Raised in non-blocking mode when the pidfile already exists. `data` is the pidfile path."""

    def __str__(self) -> str:
        return f'Failed to get pidfile lock for {self.data}'
