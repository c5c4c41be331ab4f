"""Debounced recompilation driven by editor change events."""

from __future__ import annotations

import threading
from collections.abc import Callable

from blockgen.codegen.program import CompiledProgram
from blockgen.core.node import ProgramModel

CompileFn = Callable[[ProgramModel], CompiledProgram]
ResultCallback = Callable[[CompiledProgram], None]


class CompileScheduler:
    """Coalesce bursts of change events into one trailing compilation pass.

    Every ``trigger`` restarts the delay timer and bumps a generation counter.
    When a pass finishes, its result is published only if no newer trigger
    arrived meanwhile; otherwise it is dropped and the newer pass wins. Passes
    never overlap: a timer that fires during a running pass waits for it, and a
    pass does not finish until ``on_result`` has returned.
    """

    def __init__(
        self,
        compile_fn: CompileFn,
        on_result: ResultCallback | None = None,
        *,
        delay_s: float = 0.3,
    ) -> None:
        if delay_s < 0:
            raise ValueError("delay_s must be >= 0")
        self._compile_fn = compile_fn
        self._on_result = on_result
        self._delay_s = float(delay_s)
        self._lock = threading.Lock()
        self._run_lock = threading.RLock()
        self._timer: threading.Timer | None = None
        self._generation = 0
        self._pending: ProgramModel | None = None
        self._last_result: CompiledProgram | None = None

    @property
    def last_result(self) -> CompiledProgram | None:
        with self._lock:
            return self._last_result

    @property
    def pending(self) -> bool:
        with self._lock:
            return self._pending is not None

    def trigger(self, model: ProgramModel) -> None:
        with self._lock:
            self._generation += 1
            self._pending = model
            if self._timer is not None:
                self._timer.cancel()
            timer = threading.Timer(self._delay_s, self._fire, args=(self._generation,))
            timer.daemon = True
            self._timer = timer
        timer.start()

    def cancel(self) -> None:
        """Drop the pending pass, if any. A pass already running is discarded."""
        with self._lock:
            self._generation += 1
            self._pending = None
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None

    def flush(self) -> CompiledProgram | None:
        """Run the pending pass now, on the calling thread."""
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
            if self._pending is None:
                return self._last_result
            self._generation += 1
            generation = self._generation
            model = self._pending
            self._pending = None
        return self._run(model, generation)

    def _fire(self, generation: int) -> None:
        with self._lock:
            if generation != self._generation or self._pending is None:
                return
            model = self._pending
            self._pending = None
            self._timer = None
        self._run(model, generation)

    def _run(self, model: ProgramModel, generation: int) -> CompiledProgram | None:
        with self._run_lock:
            result = self._compile_fn(model)
            with self._lock:
                if generation != self._generation:
                    return None
                self._last_result = result
            # callbacks see results in publication order
            if self._on_result is not None:
                self._on_result(result)
        return result
