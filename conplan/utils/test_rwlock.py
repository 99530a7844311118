# Copyright 2025-2026 Dimensional Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

import threading

import pytest

from conplan.utils.rwlock import ReadWriteLock


def test_readers_share_the_lock():
    lock = ReadWriteLock()
    inside = threading.Barrier(2, timeout=5.0)

    def reader():
        with lock.read():
            inside.wait()

    worker = threading.Thread(target=reader)
    worker.start()
    with lock.read():
        inside.wait()
    worker.join(timeout=5.0)
    assert not worker.is_alive()


def test_writer_excludes_readers():
    lock = ReadWriteLock()
    order = []
    started = threading.Event()

    def reader():
        started.set()
        with lock.read():
            order.append("read")

    with lock.write():
        worker = threading.Thread(target=reader)
        worker.start()
        started.wait(timeout=5.0)
        order.append("write")
    worker.join(timeout=5.0)
    assert order == ["write", "read"]


def test_writer_is_reentrant_and_may_read():
    lock = ReadWriteLock()
    with lock.write():
        with lock.write():
            with lock.read():
                pass
    # fully released
    with lock.write():
        pass


def test_nested_reads():
    lock = ReadWriteLock()
    with lock.read():
        with lock.read():
            pass
    with lock.write():
        pass


def test_cannot_upgrade():
    lock = ReadWriteLock()
    with lock.read():
        with pytest.raises(RuntimeError):
            with lock.write():
                pass
    with lock.write():
        pass
