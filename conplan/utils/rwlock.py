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

from collections.abc import Iterator
from contextlib import contextmanager
from threading import Condition, Lock, get_ident


class ReadWriteLock:
    """Shared/exclusive lock.

    Readers do not block each other. A writer waits for active readers to
    leave and blocks new readers while it is waiting, so a planning step is
    not starved by a stream of queries. Both sides are reentrant for the
    owning thread, and the writer may also take the read side. Upgrading a
    read hold to a write hold is not supported.
    """

    def __init__(self) -> None:
        self._cond = Condition(Lock())
        self._readers: dict[int, int] = {}
        self._writer: int | None = None
        self._write_depth = 0
        self._waiting_writers = 0

    @contextmanager
    def read(self) -> Iterator[None]:
        me = get_ident()
        with self._cond:
            if self._writer == me:
                self._write_depth += 1
                as_writer = True
            else:
                as_writer = False
                if me not in self._readers:
                    while self._writer is not None or self._waiting_writers:
                        self._cond.wait()
                self._readers[me] = self._readers.get(me, 0) + 1
        try:
            yield
        finally:
            with self._cond:
                if as_writer:
                    self._write_depth -= 1
                else:
                    self._readers[me] -= 1
                    if self._readers[me] == 0:
                        del self._readers[me]
                        if not self._readers:
                            self._cond.notify_all()

    @contextmanager
    def write(self) -> Iterator[None]:
        me = get_ident()
        with self._cond:
            if self._writer == me:
                self._write_depth += 1
            else:
                if me in self._readers:
                    raise RuntimeError("Cannot upgrade a read lock to a write lock")
                self._waiting_writers += 1
                try:
                    while self._writer is not None or self._readers:
                        self._cond.wait()
                finally:
                    self._waiting_writers -= 1
                self._writer = me
                self._write_depth = 1
        try:
            yield
        finally:
            with self._cond:
                self._write_depth -= 1
                if self._write_depth == 0:
                    self._writer = None
                    self._cond.notify_all()
