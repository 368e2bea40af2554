from __future__ import annotations

import threading
import time

from core.locks import ReadWriteLock

TIMEOUT = 2.0


def _wait_for(predicate, timeout: float = TIMEOUT) -> None:
    deadline = time.monotonic() + timeout
    while not predicate():
        assert time.monotonic() < deadline, "condition not reached in time"
        time.sleep(0.001)


def test_nested_readers() -> None:
    lock = ReadWriteLock()

    with lock.read(), lock.read():
        pass
    with lock.write():
        pass


def test_readers_share_the_lock() -> None:
    lock = ReadWriteLock()
    inside = threading.Barrier(3, timeout=TIMEOUT)

    def reader() -> None:
        with lock.read():
            # Every reader must be inside at once for the barrier to open.
            inside.wait()

    threads = [threading.Thread(target=reader) for _ in range(3)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(TIMEOUT)

    assert not any(thread.is_alive() for thread in threads)
    assert not inside.broken


def test_writer_waits_for_reader() -> None:
    lock = ReadWriteLock()
    acquired = threading.Event()

    def writer() -> None:
        with lock.write():
            acquired.set()

    with lock.read():
        thread = threading.Thread(target=writer)
        thread.start()
        assert not acquired.wait(0.05)

    assert acquired.wait(TIMEOUT)
    thread.join(TIMEOUT)


def test_writer_excludes_readers_and_writers() -> None:
    lock = ReadWriteLock()
    order: list[str] = []

    def reader() -> None:
        with lock.read():
            order.append("reader")

    def writer() -> None:
        with lock.write():
            order.append("writer")

    with lock.write():
        threads = [threading.Thread(target=reader), threading.Thread(target=writer)]
        for thread in threads:
            thread.start()
        time.sleep(0.05)
        assert order == []
        order.append("holder")

    for thread in threads:
        thread.join(TIMEOUT)
    assert order[0] == "holder"
    assert sorted(order[1:]) == ["reader", "writer"]


def test_waiting_writer_goes_before_new_readers() -> None:
    lock = ReadWriteLock()
    order: list[str] = []

    def writer() -> None:
        with lock.write():
            order.append("writer")

    def late_reader() -> None:
        with lock.read():
            order.append("late reader")

    with lock.read():
        writer_thread = threading.Thread(target=writer)
        writer_thread.start()
        _wait_for(lambda: lock._writers_waiting == 1)

        reader_thread = threading.Thread(target=late_reader)
        reader_thread.start()
        time.sleep(0.05)
        assert order == []

    writer_thread.join(TIMEOUT)
    reader_thread.join(TIMEOUT)
    assert order == ["writer", "late reader"]
