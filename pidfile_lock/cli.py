# SPDX-License-Identifier: LGPL-2.1-or-later
# vim:ts=4:sw=4:et
#
# Copyright (c) 2024 The pidfile-lock authors
import argparse
import asyncio
import logging
import os
import psutil
import sys
from collections.abc import Coroutine, Sequence
from typing import Optional

import pidfile_lock as pfl
from pidfile_lock.exceptions import InvalidArgumentsError, LockContendedError

logger = logging.getLogger(__name__)


def octal(value: str) -> int:
    try:
        return int(value, 8)
    except ValueError:
        raise argparse.ArgumentTypeError(f'{value!r} is not an octal file mode')


def process_name(pid: int) -> Optional[str]:
    try:
        return psutil.Process(pid).name()
    except psutil.Error:
        return None


async def do_status(args: argparse.Namespace) -> int:
    if not os.access(args.path, os.F_OK):
        print(f'{args.path} is not locked', file=sys.stderr)
        return 1
    pid, hostname, age = pfl.pidfile.parse_pidfile(args.path)
    alive = pfl.stale.is_plausibly_alive(hostname, pid)
    print(f'Owner: {pid or "unknown"}')
    print(f'Host: {hostname or "unknown"}')
    print(f'Age: {age:.1f}s')
    if hostname and hostname != pfl.host.hostname():
        print('Alive: unknown (remote host)')
    elif alive:
        name = process_name(pid)
        print('Alive: yes' + (f' ({name})' if name else ''))
    else:
        print('Alive: no')
    if args.stale_age:
        print('Stale: ' + ('yes' if pfl.stale.is_stale(args.path, args.stale_age) else 'no'))
    return 0


async def do_run(args: argparse.Namespace) -> int:
    command = args.command
    if command and command[0] == '--':
        command = command[1:]
    if not command:
        print('No command specified', file=sys.stderr)
        return 2
    try:
        lock = await pfl.lockfile.mkpidlock(args.path,
                                            mode=args.mode,
                                            poll_interval=args.poll_interval,
                                            stale_age=args.stale_age,
                                            wait=False if args.no_wait else None)
    except LockContendedError:
        print(f'Lock on {args.path} is held by another process', file=sys.stderr)
        return 1
    async with lock:
        logger.debug(f'Running {command[0]} while holding {lock.path}')
        proc = await asyncio.create_subprocess_exec(*command)
        returncode = await proc.wait()
    return returncode


async def do_clean(args: argparse.Namespace) -> int:
    if not pfl.stale.is_stale(args.path, args.stale_age):
        print(f'{args.path} is not stale', file=sys.stderr)
        return 1
    try:
        os.unlink(args.path)
    except FileNotFoundError:
        pass
    print(f'Removed stale pidfile {args.path}')
    return 0


def amain(args: Sequence[str] = sys.argv[1:]) -> Coroutine:
    parser = argparse.ArgumentParser(
        prog='pidfile-lock',
        description='Advisory pidfile locking tool')
    parser.add_argument('-d', '--debug', action='store_true', help='Enable debug logging')
    subparsers = parser.add_subparsers(required=True, metavar='command')

    status = subparsers.add_parser('status',
                                   description='''Display the owner of a pidfile lock and whether
                                                  it appears to still be running.''',
                                   help='Show lock owner')
    status.add_argument('path', help='Path of the pidfile')
    status.add_argument('--stale-age', type=float, default=0,
                        help='Also report whether the lock would be considered stale at this age')
    status.set_defaults(func=do_status)

    run = subparsers.add_parser('run',
                                description='''Run a command while holding a pidfile lock, waiting
                                               for the lock first unless --no-wait is given.''',
                                help='Run a command under a lock')
    run.add_argument('--no-wait', action='store_true', help='Fail immediately if the lock is held')
    run.add_argument('--mode', type=octal, help='File mode of the pidfile, in octal')
    run.add_argument('--poll-interval', type=float, help='Maximum time between attempts, in seconds')
    run.add_argument('--stale-age', type=float,
                     help='Break an existing lock older than this many seconds if its owner seems dead')
    run.add_argument('path', help='Path of the pidfile')
    run.add_argument('command', nargs=argparse.REMAINDER, help='Command to run')
    run.set_defaults(func=do_run)

    clean = subparsers.add_parser('clean',
                                  description='''Remove a pidfile if it has been abandoned by a
                                                 process that is no longer running.''',
                                  help='Remove a stale lock')
    clean.add_argument('--stale-age', type=float, required=True, help='Age in seconds after which a lock may be stale')
    clean.add_argument('path', help='Path of the pidfile')
    clean.set_defaults(func=do_clean)

    parsed_args = parser.parse_args(args)

    pfl.logging.reconfigure_logging(level='DEBUG' if parsed_args.debug else None)

    coro = parsed_args.func(parsed_args)
    assert asyncio.iscoroutine(coro)
    return coro


def main(args: Sequence[str] = sys.argv[1:]) -> None:  # pragma: no cover
    try:
        sys.exit(asyncio.run(amain(args)))
    except InvalidArgumentsError as e:
        print(e, file=sys.stderr)
        sys.exit(2)


if __name__ == '__main__':  # pragma: no cover
    main()
