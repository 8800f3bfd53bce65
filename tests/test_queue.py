"""Tests for queue.py."""

from __future__ import annotations

import threading

from absinthe_chat.queue import ConcurrentQueue, LocalInputBuffer, MessageQueue

from chat_fixtures import make_chat_event


def test_pop_all_returns_arrival_order() -> None:
    queue: ConcurrentQueue[int] = ConcurrentQueue()
    for item in range(5):
        queue.push(item)
    assert queue.pop_all() == [0, 1, 2, 3, 4]


def test_pop_all_twice_returns_empty() -> None:
    queue = MessageQueue()
    first = make_chat_event(content="?ping")
    queue.push(first)
    assert queue.pop_all() == [first]
    assert queue.pop_all() == []
    assert len(queue) == 0


def test_try_pop() -> None:
    queue = LocalInputBuffer()
    assert queue.try_pop() is None
    queue.push("a")
    queue.push("b")
    assert queue.try_pop() == "a"
    assert queue.pop_all() == ["b"]
    assert queue.try_pop() is None


def test_len_and_bool() -> None:
    queue = LocalInputBuffer()
    assert not queue
    queue.push("line")
    assert queue
    assert len(queue) == 1


def test_concurrent_producers_deliver_everything_once() -> None:
    queue: ConcurrentQueue[tuple[int, int]] = ConcurrentQueue()
    producers = 4
    per_producer = 500

    def produce(producer: int) -> None:
        for index in range(per_producer):
            queue.push((producer, index))

    threads = [threading.Thread(target=produce, args=(n,)) for n in range(producers)]
    drained: list[tuple[int, int]] = []
    for thread in threads:
        thread.start()
    while any(thread.is_alive() for thread in threads):
        drained.extend(queue.pop_all())
    for thread in threads:
        thread.join()
    drained.extend(queue.pop_all())

    assert len(drained) == producers * per_producer
    assert len(set(drained)) == len(drained)
    for producer in range(producers):
        indexes = [index for owner, index in drained if owner == producer]
        assert indexes == list(range(per_producer))
