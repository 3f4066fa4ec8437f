import time
import logging
import threading
from collections import deque
from dataclasses import dataclass
from typing import Callable, Optional

from .digest import encode_text, hash_twice
from .rate import RateTracker, display_rate

log = logging.getLogger("powsim.mining")

IDLE = "idle"
RUNNING = "running"
FOUND = "found"
STOPPED = "stopped"

MIN_DIFFICULTY = 1
MAX_DIFFICULTY = 8

STOP_MESSAGE = "Mining process stopped by user."


def clamp_difficulty(difficulty) -> int:
    return max(MIN_DIFFICULTY, min(MAX_DIFFICULTY, int(difficulty)))


@dataclass(frozen=True)
class MiningConfig:
    """Block payload and leading-zero difficulty for one run."""
    block_data: str = ""
    difficulty: int = 4

    def __post_init__(self):
        object.__setattr__(self, "block_data", self.block_data or "")
        object.__setattr__(self, "difficulty", clamp_difficulty(self.difficulty))

    @property
    def target(self) -> str:
        return "0" * self.difficulty

    def candidate(self, nonce: int) -> bytes:
        return encode_text(f"{self.block_data}{nonce}")

    def to_dict(self):
        return {"data": self.block_data, "difficulty": self.difficulty, "target": self.target}


@dataclass(frozen=True)
class MiningResult:
    nonce: int
    digest: str

    def to_dict(self):
        return {"nonce": self.nonce, "hash": self.digest}


class SearchState:
    def __init__(self):
        self.nonce = 0
        self.running = False
        self.last_report_time = 0.0
        self.last_report_nonce = 0
        self.current_rate: Optional[float] = 0.0


class MiningLog:
    """
    Run log:
    - info: rolling window of the most recent `limit` report lines
    - terminal: success/stop/failure lines, never evicted
    """
    def __init__(self, limit: int = 10):
        self.info = deque(maxlen=limit)
        self.terminal = []

    def add(self, line: str):
        self.info.append(line)

    def add_terminal(self, *lines: str):
        self.terminal.extend(lines)

    def clear(self):
        self.info.clear()
        self.terminal.clear()

    def entries(self):
        return list(self.info) + list(self.terminal)


class _Run:
    def __init__(self, run_id: int, config: MiningConfig):
        self.id = run_id
        self.config = config
        self.cancel = threading.Event()
        self.done = threading.Event()


def search(block_data: str, difficulty, hasher=hash_twice, max_iters=None) -> Optional[MiningResult]:
    """Blocking linear scan from nonce 0; None when max_iters is exhausted."""
    config = MiningConfig(block_data, difficulty)
    prefix = config.target
    nonce = 0
    while max_iters is None or nonce < int(max_iters):
        h = hasher(config.candidate(nonce))
        if h.startswith(prefix):
            return MiningResult(nonce, h)
        nonce += 1
    return None


class Miner:
    """
    Cooperative nonce search engine.

    start() launches one run on a worker thread; stop() cancels it at the
    top of the next iteration. Observers read snapshot() or subscribe()
    to events: started, report, found, stopped, failed.
    """
    def __init__(self, hasher: Callable[[bytes], str] = hash_twice,
                 report_interval: float = 2.0, yield_every: int = 500,
                 log_limit: int = 10, clock: Callable[[], float] = time.monotonic):
        self.hasher = hasher
        self.report_interval = report_interval
        self.yield_every = max(1, int(yield_every))
        self.clock = clock
        self.status = IDLE
        self.config: Optional[MiningConfig] = None
        self.state = SearchState()
        self.result: Optional[MiningResult] = None
        self.journal = MiningLog(log_limit)
        self._lock = threading.Lock()
        self._listeners = []
        self._run: Optional[_Run] = None
        self._run_seq = 0

    # ---------- commands ----------
    def start(self, block_data: str = "", difficulty=4, background: bool = True) -> bool:
        config = MiningConfig(block_data, difficulty)
        with self._lock:
            if self.status == RUNNING:
                return False
            self._run_seq += 1
            run = _Run(self._run_seq, config)
            self._run = run
            self.config = config
            self.result = None
            self.journal.clear()
            self.state = SearchState()
            self.state.running = True
            self.state.current_rate = None
            self.status = RUNNING
        log.info("run %d started: difficulty=%d target=%s", run.id, config.difficulty, config.target)
        self._emit("started")
        if background:
            worker = threading.Thread(target=self._mine, args=(run,), name=f"miner-{run.id}", daemon=True)
            worker.start()
        else:
            self._mine(run)
        return True

    def stop(self) -> bool:
        with self._lock:
            if self.status != RUNNING:
                return False
            run = self._run
            run.cancel.set()
            self.status = STOPPED
            self.state.running = False
            self.state.current_rate = 0.0
            self.journal.add_terminal(STOP_MESSAGE)
        log.info("run %d stopped at nonce %d", run.id, self.state.nonce)
        self._emit("stopped")
        return True

    def wait(self, timeout: Optional[float] = None) -> bool:
        run = self._run
        if run is None:
            return True
        return run.done.wait(timeout)

    # ---------- observation ----------
    def snapshot(self) -> dict:
        with self._lock:
            return {
                "state": self.status,
                "nonce": self.state.nonce,
                "rate": self.state.current_rate,
                "rate_display": display_rate(self.state.current_rate),
                "log": self.journal.entries(),
                "result": self.result.to_dict() if self.result else None,
                "config": self.config.to_dict() if self.config else None,
            }

    def subscribe(self, callback):
        self._listeners.append(callback)
        def unsubscribe():
            if callback in self._listeners:
                self._listeners.remove(callback)
        return unsubscribe

    def _emit(self, event: str):
        if not self._listeners:
            return
        snap = self.snapshot()
        for cb in list(self._listeners):
            try:
                cb(event, snap)
            except Exception:
                log.exception("listener failed on %s", event)

    # ---------- loop ----------
    def _mine(self, run: _Run):
        try:
            self._loop(run)
        finally:
            run.done.set()

    def _loop(self, run: _Run):
        config = run.config
        prefix = config.target
        tracker = RateTracker(self.report_interval)
        tracker.reset(self.clock())
        nonce = 0
        while not run.cancel.is_set():
            try:
                h = self.hasher(config.candidate(nonce))
            except Exception as e:
                self._fail(run, nonce, e)
                return

            if h.startswith(prefix):
                self._found(run, nonce, h)
                return

            rate = tracker.sample(nonce, self.clock())
            if rate is not None:
                self._report(run, nonce, h, rate, tracker)

            nonce += 1
            if nonce % self.yield_every == 0:
                with self._lock:
                    if self._run is run and self.status == RUNNING:
                        self.state.nonce = nonce
                time.sleep(0)

        with self._lock:
            if self._run is run:
                self.state.nonce = nonce

    def _report(self, run: _Run, nonce: int, h: str, rate: float, tracker: RateTracker):
        with self._lock:
            if self._run is not run or run.cancel.is_set():
                return
            self.state.nonce = nonce
            self.state.current_rate = rate
            self.state.last_report_time = tracker.last_time
            self.state.last_report_nonce = tracker.last_nonce
            self.journal.add(f"[~{display_rate(rate)}] Attempt {nonce}: {h}")
        log.debug("run %d nonce=%d rate=%s", run.id, nonce, display_rate(rate))
        self._emit("report")

    def _found(self, run: _Run, nonce: int, h: str):
        with self._lock:
            # a stop observed before this point wins
            if self._run is not run or run.cancel.is_set():
                return
            self.result = MiningResult(nonce, h)
            self.state.nonce = nonce
            self.state.running = False
            self.state.current_rate = 0.0
            self.journal.add_terminal(f"Success! Found nonce: {nonce}", f"Final Hash: {h}")
            self.status = FOUND
        log.info("run %d found nonce=%d hash=%s", run.id, nonce, h)
        self._emit("found")

    def _fail(self, run: _Run, nonce: int, err: Exception):
        log.exception("run %d: digest failed at nonce %d", run.id, nonce)
        with self._lock:
            if self._run is not run or run.cancel.is_set():
                return
            run.cancel.set()
            self.state.nonce = nonce
            self.state.running = False
            self.state.current_rate = 0.0
            self.journal.add_terminal(f"Mining failed: {err}")
            self.status = STOPPED
        self._emit("failed")
