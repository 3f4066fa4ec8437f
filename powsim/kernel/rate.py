from typing import Optional

CALCULATING = "Calculating..."

def format_hash_rate(hashes_per_second: float) -> str:
    if hashes_per_second < 1000:
        return f"{hashes_per_second:.2f} H/s"
    if hashes_per_second < 1_000_000:
        return f"{hashes_per_second / 1000:.2f} kH/s"
    return f"{hashes_per_second / 1_000_000:.2f} MH/s"

def display_rate(rate: Optional[float]) -> str:
    if rate is None:
        return CALCULATING
    return format_hash_rate(rate)


class RateTracker:
    """
    Samples throughput over a fixed wall-clock window:
    rate = (nonce - last_nonce) / seconds since last report.
    """
    def __init__(self, interval: float = 2.0):
        self.interval = float(interval)
        self.last_time = 0.0
        self.last_nonce = 0

    def reset(self, now: float, nonce: int = 0):
        self.last_time = now
        self.last_nonce = nonce

    def due(self, now: float) -> bool:
        return now - self.last_time > self.interval

    def sample(self, nonce: int, now: float) -> Optional[float]:
        if not self.due(now):
            return None
        elapsed = now - self.last_time
        rate = (nonce - self.last_nonce) / elapsed
        self.reset(now, nonce)
        return rate
