# radar/utils/ratelimit.py
import os, time, random, threading
from collections import deque
import requests

# Requests per second allowed against each explorer host.
# EXPLORER_QPS overrides the default; set_default_qps() overrides at runtime.
DEFAULT_QPS = float(os.getenv("EXPLORER_QPS", "4.0"))

# One limiter per host key (e.g. 'etherscan_v2')
_LIMITERS = {}
_LOCK = threading.Lock()

RETRY_STATUSES = (429, 500, 502, 503, 504)
MAX_ATTEMPTS = 5


class RateLimiter:
    """Sliding one-second window shared by every thread hitting the same host."""

    def __init__(self, max_per_sec: float):
        self.max_per_sec = max(0.1, float(max_per_sec))
        self.window = deque()
        self.lock = threading.Lock()

    def _drop_expired(self, now: float):
        while self.window and now - self.window[0] > 1.0:
            self.window.popleft()

    def wait(self):
        with self.lock:
            now = time.monotonic()
            self._drop_expired(now)
            if len(self.window) >= self.max_per_sec:
                sleep_for = 1.0 - (now - self.window[0]) + 0.001
                if sleep_for > 0:
                    time.sleep(sleep_for)
                self._drop_expired(time.monotonic())
            self.window.append(time.monotonic())


def get_limiter(host_key: str, max_qps: float | None = None) -> RateLimiter:
    with _LOCK:
        qps = DEFAULT_QPS if max_qps is None else float(max_qps)
        lim = _LIMITERS.get(host_key)
        if lim is None or lim.max_per_sec != max(0.1, qps):
            lim = RateLimiter(qps)
            _LIMITERS[host_key] = lim
        return lim


def _backoff_sleep(backoff: float) -> float:
    time.sleep(backoff + random.uniform(0, 0.2))
    return min(backoff * 2, 4.0)


def http_get_json(host_key: str, url: str, params: dict, max_qps: float | None = None, timeout: int = 15) -> dict:
    """
    Rate-limited GET returning resp.json().
    Retries 429/5xx and connection errors with jittered exponential backoff;
    the last attempt lets its exception surface.
    """
    lim = get_limiter(host_key, max_qps)
    backoff = 0.5
    for _ in range(MAX_ATTEMPTS - 1):
        lim.wait()
        try:
            resp = requests.get(url, params=params, timeout=timeout)
        except requests.RequestException as e:
            print(f"[HTTP] {host_key} request error: {e}; retrying")
            backoff = _backoff_sleep(backoff)
            continue
        if resp.status_code in RETRY_STATUSES:
            print(f"[HTTP] {host_key} status {resp.status_code}; retrying")
            backoff = _backoff_sleep(backoff)
            continue
        resp.raise_for_status()
        return resp.json()

    lim.wait()
    resp = requests.get(url, params=params, timeout=timeout)
    resp.raise_for_status()
    return resp.json()


def set_default_qps(qps: float):
    global DEFAULT_QPS
    DEFAULT_QPS = max(0.1, float(qps))
