import hashlib
import threading

import pytest

from powsim.config import Settings
from powsim.kernel.digest import encode_text, hash_once, hash_twice
from powsim.kernel.preview import compute_digest_pair, PreviewDebouncer
from powsim.kernel.rate import RateTracker, display_rate, format_hash_rate


def sha256d_hex(text):
    return hashlib.sha256(hashlib.sha256(text.encode("utf-8")).digest()).hexdigest()

def test_hash_once_is_deterministic_hex():
    for data in (b"", b"test", "ünïcode".encode("utf-8"), b"x" * 1000):
        h = hash_once(data)
        assert h == hash_once(data)
        assert len(h) == 64
        assert h == h.lower()
        int(h, 16)

def test_empty_input_hashes():
    assert hash_once(b"") == hashlib.sha256(b"").hexdigest()
    assert hash_twice(encode_text("")) == sha256d_hex("")

def test_hash_twice_uses_raw_digest_bytes():
    data = b"Hello Bitcoin!"
    first = hashlib.sha256(data).digest()
    assert hash_twice(data) == hash_once(first)
    # hashing the hex text is a different function
    assert hash_twice(data) != hash_once(hash_once(data).encode("ascii"))

def test_format_hash_rate():
    assert format_hash_rate(500) == "500.00 H/s"
    assert format_hash_rate(1500) == "1.50 kH/s"
    assert format_hash_rate(2_500_000) == "2.50 MH/s"
    assert format_hash_rate(0) == "0.00 H/s"
    assert format_hash_rate(999.999) == "1000.00 H/s"
    assert format_hash_rate(1000) == "1.00 kH/s"

def test_display_rate_unknown():
    assert display_rate(None) == "Calculating..."
    assert display_rate(12.5) == "12.50 H/s"

def test_rate_tracker_samples_per_interval():
    tr = RateTracker(interval=2.0)
    tr.reset(10.0)
    assert tr.sample(100, 11.0) is None
    assert tr.sample(400, 12.0) is None
    assert tr.sample(1000, 14.0) == pytest.approx(250.0)
    assert tr.last_nonce == 1000
    assert tr.sample(1500, 15.0) is None

def test_digest_pair_empty():
    steps = []
    pair = compute_digest_pair("", on_progress=steps.append)
    assert pair.first is None and pair.second is None
    assert steps == [0]

def test_digest_pair_matches_double_sha256():
    steps = []
    pair = compute_digest_pair("Hello Bitcoin!", on_progress=steps.append)
    assert pair.first == hashlib.sha256(b"Hello Bitcoin!").hexdigest()
    assert pair.second == sha256d_hex("Hello Bitcoin!")
    assert pair == compute_digest_pair("Hello Bitcoin!")
    assert steps == [1, 2, 0]

def test_preview_debouncer_keeps_latest():
    done = threading.Event()
    seen = []

    def cb(pair):
        seen.append(pair)
        if pair.first is not None and pair.second == sha256d_hex("Hello Bitcoin!"):
            done.set()

    deb = PreviewDebouncer(cb, delay=0.05)
    deb.submit("Hello")
    deb.submit("Hello Bitcoin!")
    assert done.wait(5.0)
    assert seen[-1] == compute_digest_pair("Hello Bitcoin!")
    assert deb.latest == seen[-1]
    deb.cancel()

def test_settings_from_env(monkeypatch):
    monkeypatch.setenv("POWSIM_REPORT_INTERVAL_MS", "500")
    monkeypatch.setenv("POWSIM_DEFAULT_DIFFICULTY", "2")
    monkeypatch.delenv("POWSIM_PORT", raising=False)
    s = Settings.from_env()
    assert s.report_interval == 0.5
    assert s.default_difficulty == 2
    assert s.port == 5000

def test_settings_rejects_bad_int(monkeypatch):
    monkeypatch.setenv("POWSIM_YIELD_EVERY", "lots")
    with pytest.raises(ValueError):
        Settings.from_env()
