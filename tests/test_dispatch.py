"""Tests for hanoi_tutor/dispatch.py - front-end execution contexts."""

import threading

import pytest

from hanoi_tutor.dispatch import ImmediateDispatcher, SerialDispatcher


class TestSerialDispatcher:
    def test_runs_in_fifo_order_on_one_thread(self):
        dispatcher = SerialDispatcher("fifo")
        try:
            seen = []
            threads = set()

            def record(value):
                seen.append(value)
                threads.add(threading.get_ident())

            futures = [dispatcher.submit(record, i) for i in range(20)]
            for future in futures:
                future.result(timeout=1.0)
            assert seen == list(range(20))
            assert len(threads) == 1
            assert threading.get_ident() not in threads
        finally:
            dispatcher.shutdown()

    def test_is_dispatch_thread(self):
        dispatcher = SerialDispatcher()
        try:
            assert not dispatcher.is_dispatch_thread()
            assert dispatcher.submit(dispatcher.is_dispatch_thread).result(timeout=1.0)
        finally:
            dispatcher.shutdown()

    def test_exceptions_reach_the_future(self):
        dispatcher = SerialDispatcher()
        try:
            future = dispatcher.submit(lambda: 1 / 0)
            with pytest.raises(ZeroDivisionError):
                future.result(timeout=1.0)
            assert dispatcher.submit(lambda: "still alive").result(timeout=1.0) == "still alive"
        finally:
            dispatcher.shutdown()

    def test_submit_after_shutdown(self):
        dispatcher = SerialDispatcher()
        dispatcher.shutdown()
        with pytest.raises(RuntimeError):
            dispatcher.submit(lambda: None)


class TestImmediateDispatcher:
    def test_runs_inline(self):
        dispatcher = ImmediateDispatcher()
        future = dispatcher.submit(threading.get_ident)
        assert future.done()
        assert future.result() == threading.get_ident()
        assert dispatcher.is_dispatch_thread()

    def test_captures_exception(self):
        future = ImmediateDispatcher().submit(lambda: [][1])
        with pytest.raises(IndexError):
            future.result()
