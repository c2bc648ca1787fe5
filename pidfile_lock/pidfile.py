# SPDX-License-Identifier: LGPL-2.1-or-later
# vim:ts=4:sw=4:et
#
# Copyright (c) 2024 The pidfile-lock authors
import os
import time
from typing import BinaryIO, NamedTuple, Union

import pidfile_lock as pfl
from pidfile_lock.constants import MAX_PID

__all__ = [
    'EMPTY',
    'ParsedPidfile',
    'decode',
    'encode',
    'parse_pidfile',
    'write_pidfile',
]


class ParsedPidfile(NamedTuple):
    pid: int
    hostname: str
    age: float


EMPTY = ParsedPidfile(0, '', 0.0)


def encode(pid: int, hostname: str) -> bytes:
    return f'{pid} {hostname}'.encode()


def decode(body: bytes) -> tuple[int, str]:
    fields = body.split(b' ', 1)
    pid = 0
    # Surrounding whitespace is tolerated (`echo $$ > pidfile`), but
    # bytes.isdigit only accepts ASCII digits, so signs are still rejected
    digits = fields[0].strip()
    if digits.isdigit():
        pid = int(digits)
        if pid > MAX_PID:
            pid = 0
    hostname = fields[1].decode(errors='replace') if len(fields) == 2 else ''
    return pid, hostname


def write_pidfile(f: BinaryIO, pid: int) -> None:
    f.write(encode(pid, pfl.host.hostname()))
    f.flush()


def _parse_file(f: BinaryIO) -> ParsedPidfile:
    pid, hostname = decode(f.read())
    age = time.time() - os.fstat(f.fileno()).st_mtime
    return ParsedPidfile(pid, hostname, age)


def parse_pidfile(file: Union[BinaryIO, str, os.PathLike]) -> ParsedPidfile:
    if not isinstance(file, (str, os.PathLike)):
        return _parse_file(file)
    try:
        with open(file, 'rb') as f:
            return _parse_file(f)
    except OSError:
        return EMPTY
