# SPDX-License-Identifier: LGPL-2.1-or-later
# vim:ts=4:sw=4:et
#
# Copyright (c) 2024 The pidfile-lock authors
import os
import pytest
import pidfile_lock as pfl
from pidfile_lock.pidfile import EMPTY, decode, encode, parse_pidfile, write_pidfile
from . import write_lock
from . import lock_directory, pidfile  # NOQA: F401


def test_encode():
    assert encode(1234, 'host') == b'1234 host'
    assert encode(0, '') == b'0 '


def test_encode_hostname_verbatim():
    assert encode(1, ' host\r\n') == b'1  host\r\n'


def test_decode():
    assert decode(b'1234 host') == (1234, 'host')


def test_decode_hostname_spaces():
    assert decode(b'1234 my host name ') == (1234, 'my host name ')
    assert decode(b'-1  host\r\n') == (0, ' host\r\n')


def test_decode_no_hostname():
    assert decode(b'1234') == (1234, '')


def test_decode_whitespace_pid():
    assert decode(b'1234\n') == (1234, '')
    assert decode(b'\t1234\r\n') == (1234, '')
    assert decode(b'1234\t host') == (1234, 'host')
    assert decode(b'\n') == (0, '')


def test_decode_empty():
    assert decode(b'') == (0, '')


@pytest.mark.parametrize('body', [b'abc host', b'-5 host', b'+5 host', b'0x10 host', b'4294967296 host'])
def test_decode_invalid_pid(body):
    pid, hostname = decode(body)
    assert pid == 0
    assert hostname


def test_decode_max_pid():
    assert decode(b'4294967295 host') == (0xFFFFFFFF, 'host')


def test_round_trip():
    for pid, hostname in ((1, 'a'), (4242, 'build-01.example.com'), (0xFFFFFFFF, 'tab\there'), (7, '')):
        assert decode(encode(pid, hostname)) == (pid, hostname)


def test_write_pidfile(pidfile, monkeypatch):
    monkeypatch.setattr(pfl.host, 'hostname', lambda: 'testhost')
    with open(pidfile, 'wb') as f:
        write_pidfile(f, 4321)
    with open(pidfile, 'rb') as f:
        assert f.read() == b'4321 testhost'


def test_parse_nonexistent(lock_directory):
    assert parse_pidfile(f'{lock_directory}/nonexistent') == (0, '', 0.0)
    assert parse_pidfile(f'{lock_directory}/nonexistent') is EMPTY


def test_parse_path(pidfile):
    write_lock(pidfile, f'{os.getpid()} {pfl.host.hostname()}', age=123)
    pid, hostname, age = parse_pidfile(pidfile)
    assert pid == os.getpid()
    assert hostname == pfl.host.hostname()
    assert age == pytest.approx(123, abs=5)


def test_parse_open_file(pidfile):
    write_lock(pidfile, '99 otherhost', age=50)
    with open(pidfile, 'rb') as f:
        pid, hostname, age = parse_pidfile(f)
    assert pid == 99
    assert hostname == 'otherhost'
    assert age == pytest.approx(50, abs=5)


def test_parse_malformed(pidfile):
    write_lock(pidfile, 'liar somehost', age=30)
    pid, hostname, age = parse_pidfile(pidfile)
    assert pid == 0
    assert hostname == 'somehost'
    assert age == pytest.approx(30, abs=5)


def test_parse_empty_file(pidfile):
    write_lock(pidfile, '', age=10)
    pid, hostname, age = parse_pidfile(pidfile)
    assert pid == 0
    assert hostname == ''
    assert age == pytest.approx(10, abs=5)


def test_parse_unreadable(pidfile, monkeypatch):
    write_lock(pidfile, '1 host')

    def open_fake(*args, **kwargs):
        raise PermissionError

    monkeypatch.setattr('builtins.open', open_fake)
    assert parse_pidfile(pidfile) == EMPTY


def test_parse_unexpected_error(pidfile, monkeypatch):
    write_lock(pidfile, '1 host')

    def open_fake(*args, **kwargs):
        raise RuntimeError

    monkeypatch.setattr('builtins.open', open_fake)
    try:
        parse_pidfile(pidfile)
        assert False
    except RuntimeError:
        pass


def test_parse_future(pidfile):
    write_lock(pidfile, '1 host', age=-100)
    _, _, age = parse_pidfile(pidfile)
    assert age == pytest.approx(-100, abs=5)
