# SPDX-License-Identifier: LGPL-2.1-or-later
# vim:ts=4:sw=4:et
#
# Copyright (c) 2024 The pidfile-lock authors
import configparser
import os
import pytest
import tempfile
import time
import pidfile_lock as pfl


@pytest.fixture
def lock_directory():
    d = tempfile.TemporaryDirectory(prefix='pfl-')
    yield d.name

    d.cleanup()


@pytest.fixture
def pidfile(lock_directory):
    return f'{lock_directory}/pidfile'


@pytest.fixture
def umask():
    old_umask = os.umask(0o002)
    yield

    os.umask(old_umask)


@pytest.fixture
def mock_config(monkeypatch):
    testconf = configparser.ConfigParser()
    monkeypatch.setattr(pfl.config, 'config', testconf)
    return testconf


@pytest.fixture
def fake_probe(monkeypatch):
    class FakeProbe:
        def __init__(self):
            self.alive: set[int] = set()
            self.probed: list[int] = []

        def __call__(self, pid: int) -> bool:
            self.probed.append(pid)
            return pid in self.alive

    probe = FakeProbe()
    monkeypatch.setattr(pfl.host, 'probe_process', probe)
    return probe


def write_lock(path: str, body: str, age: float = 0) -> None:
    with open(path, 'w') as f:
        f.write(body)
    if age:
        mtime = time.time() - age
        os.utime(path, (mtime, mtime))


class HitCounter:
    def __init__(self, ret=None, exc=None):
        self.hits = 0
        self.ret = ret
        self.exc = exc

    def __call__(self, *args, **kwargs):
        self.hits += 1
        if self.exc:
            raise self.exc
        return self.ret


@pytest.fixture
def count_hits():
    return HitCounter()


def unreachable(*args, **kwargs):
    assert False


def always_raise(exc):
    def ret(*args, **kwargs):
        raise exc
    return ret
