"""Debounced recompilation."""

from __future__ import annotations

import threading

import pytest

from blockgen.codegen import CompiledProgram, CompileScheduler, compile_program
from tests.conftest import digital_write, on_start, program


class _Recorder:
    def __init__(self):
        self.models = []

    def __call__(self, model):
        self.models.append(model)
        return compile_program(model)


class TestCompileScheduler:
    def test_burst_coalesces_into_one_pass(self):
        recorder = _Recorder()
        scheduler = CompileScheduler(recorder, delay_s=60)
        first = program(on_start(digital_write(1, 1)))
        last = program(on_start(digital_write(2, 1)))
        scheduler.trigger(first)
        scheduler.trigger(last)
        assert scheduler.pending

        result = scheduler.flush()

        assert recorder.models == [last]
        assert isinstance(result, CompiledProgram)
        assert "pin_2.value(1)" in result.setup_text
        assert scheduler.last_result is result
        assert not scheduler.pending

    def test_flush_without_pending_returns_last_result(self):
        scheduler = CompileScheduler(_Recorder(), delay_s=60)
        assert scheduler.flush() is None
        scheduler.trigger(program())
        result = scheduler.flush()
        assert scheduler.flush() is result

    def test_cancel_drops_pending_pass(self):
        recorder = _Recorder()
        scheduler = CompileScheduler(recorder, delay_s=60)
        scheduler.trigger(program())
        scheduler.cancel()
        assert not scheduler.pending
        assert scheduler.flush() is None
        assert recorder.models == []

    def test_trailing_pass_runs_after_delay(self):
        done = threading.Event()
        published = []

        def on_result(result):
            published.append(result)
            done.set()

        scheduler = CompileScheduler(compile_program, on_result, delay_s=0.01)
        scheduler.trigger(program(on_start()))
        assert done.wait(timeout=5)
        assert published == [scheduler.last_result]

    def test_superseded_result_is_dropped(self):
        published = []
        stale = program(on_start(digital_write(1, 1)))
        fresh = program(on_start(digital_write(2, 1)))
        scheduler = None

        def compile_fn(model):
            if model is stale:
                # an edit lands while this pass is running
                scheduler.trigger(fresh)
            return compile_program(model)

        scheduler = CompileScheduler(compile_fn, published.append, delay_s=60)
        scheduler.trigger(stale)
        assert scheduler.flush() is None
        assert published == []
        assert scheduler.last_result is None

        result = scheduler.flush()
        assert published == [result]
        assert "pin_2.value(1)" in result.setup_text

    def test_callbacks_follow_publication_order(self):
        first = program(on_start(digital_write(1, 1)))
        second = program(on_start(digital_write(2, 1)))
        in_callback = threading.Event()
        release = threading.Event()
        recorder = _Recorder()
        published = []

        def on_result(result):
            if not published and not in_callback.is_set():
                in_callback.set()
                release.wait(timeout=5)
            published.append(result)

        scheduler = CompileScheduler(recorder, on_result, delay_s=60)
        scheduler.trigger(first)
        older = threading.Thread(target=scheduler.flush)
        older.start()
        assert in_callback.wait(timeout=5)

        scheduler.trigger(second)
        newer = threading.Thread(target=scheduler.flush)
        newer.start()
        newer.join(timeout=0.2)
        # the newer pass waits until the older callback returns
        assert recorder.models == [first]

        release.set()
        older.join(timeout=5)
        newer.join(timeout=5)
        assert recorder.models == [first, second]
        assert ["pin_1.value(1)" in r.setup_text for r in published] == [True, False]
        assert scheduler.last_result is published[-1]

    def test_callback_may_flush_again(self):
        results = []
        scheduler = None

        def on_result(result):
            results.append(result)
            if len(results) == 1:
                scheduler.trigger(program(on_start(digital_write(2, 0))))
                scheduler.flush()

        scheduler = CompileScheduler(compile_program, on_result, delay_s=60)
        scheduler.trigger(program(on_start(digital_write(2, 1))))
        scheduler.flush()
        assert len(results) == 2
        assert scheduler.last_result is results[1]

    def test_negative_delay_rejected(self):
        with pytest.raises(ValueError, match="delay_s"):
            CompileScheduler(compile_program, delay_s=-1)
