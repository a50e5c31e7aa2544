import threading
from contextlib import contextmanager


class RWLock:
    """
    Readers/writer lock for threads.

    Any number of readers may hold the lock together; a writer holds it
    alone. Readers arriving while a writer waits are not held back, so a
    steady flow of readers can delay a writer.
    """
    def __init__(self):
        self._readers = 0
        self._readers_lock = threading.Lock()
        self._writer_lock = threading.Lock()

    @contextmanager
    def read(self):
        self._acquire_read()
        try:
            yield
        finally:
            self._release_read()

    @contextmanager
    def write(self):
        self._writer_lock.acquire()
        try:
            yield
        finally:
            self._writer_lock.release()

    def _acquire_read(self):
        with self._readers_lock:
            self._readers += 1
            if self._readers == 1:
                # first reader blocks writers
                self._writer_lock.acquire()

    def _release_read(self):
        with self._readers_lock:
            self._readers -= 1
            if self._readers == 0:
                # last reader releases writer lock
                self._writer_lock.release()
