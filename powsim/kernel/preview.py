import time
import logging
import threading
from typing import NamedTuple, Optional

from .digest import encode_text, sha256_raw

log = logging.getLogger("powsim.preview")


class DigestPair(NamedTuple):
    first: Optional[str]
    second: Optional[str]

    def to_dict(self):
        return {"first": self.first, "second": self.second}


EMPTY_PAIR = DigestPair(None, None)


def compute_digest_pair(text: str, on_progress=None) -> DigestPair:
    """
    Two sequential SHA-256 passes over the UTF-8 text.
    on_progress(step) gets 1 before pass one, 2 before pass two, 0 when done.
    """
    def progress(step):
        if on_progress is not None:
            on_progress(step)

    if not text:
        progress(0)
        return EMPTY_PAIR

    progress(1)
    first = sha256_raw(encode_text(text))
    time.sleep(0)

    progress(2)
    second = sha256_raw(first)
    time.sleep(0)

    progress(0)
    return DigestPair(first.hex(), second.hex())


class PreviewDebouncer:
    """Recomputes the digest pair once input has been quiet for `delay` seconds."""
    def __init__(self, callback=None, delay: float = 0.3):
        self.callback = callback
        self.delay = delay
        self.latest = EMPTY_PAIR
        self._timer = None
        self._lock = threading.Lock()

    def submit(self, text: str):
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._timer = threading.Timer(self.delay, self._fire, args=(text,))
            self._timer.daemon = True
            self._timer.start()

    def cancel(self):
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None

    def _fire(self, text: str):
        pair = compute_digest_pair(text)
        self.latest = pair
        log.debug("preview updated for %d chars", len(text or ""))
        if self.callback is not None:
            self.callback(pair)
