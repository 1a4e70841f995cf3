"""
Entry Workflow Metrics
----------------------
Outcome counters and latency samples for the two remote calls, kept in Redis
so they survive restarts. Verification keeps INVALID and TRANSPORT_ERROR apart,
submission counts each failure kind separately.

Callers treat every function here as best-effort (see `safe_record`).
"""
from __future__ import annotations
import time
from typing import Callable, Dict, List, Tuple
from giveaway.store.redis_conn import get_redis
from giveaway.settings import settings
from giveaway.observability.logging import log

# Keys
K_VERIFY_OUTCOME = "metrics:verify:outcome:{outcome}"      # INCR
K_VERIFY_LAT     = "metrics:verify:latencies"               # LPUSH ms
K_CLAIM_OUTCOME  = "metrics:claim:outcome:{outcome}"        # INCR
K_CLAIM_LAT      = "metrics:claim:latencies"                # LPUSH ms
K_VERIFY_SKIPPED = "metrics:verify:skipped_cached"          # INCR
K_VERIFY_STALE   = "metrics:verify:discarded_stale"         # INCR

VERIFY_OUTCOMES = ("VALID", "INVALID", "TRANSPORT_ERROR")
CLAIM_OUTCOMES = (
    "SUCCESS",
    "DUPLICATE_CLAIM",
    "PAYLOAD_TOO_LARGE",
    "INVALID_DATA",
    "SERVER_ERROR",
    "UNKNOWN",
    "TRANSPORT_ERROR",
)

_MAX_SAMPLES = 500

def _percentile(data: List[float], p: float) -> float:
    """Deterministic percentile (nearest-rank on sorted data)."""
    if not data:
        return 0.0
    d = sorted(data)
    k = max(1, int(round(p * len(d))))
    return float(d[k - 1])

def _now_s() -> int:
    return int(time.time())

def safe_record(fn: Callable, *args) -> None:
    """Run a metrics writer without letting Redis trouble reach the workflow."""
    if not settings.METRICS_ENABLED:
        return
    try:
        fn(*args)
    except Exception as e:
        try:
            log(event="metrics_write_failed", metric=getattr(fn, "__name__", "?"), error=str(e)[:200])
        except Exception:
            pass

def increment_verification_outcome(outcome: str) -> None:
    r = get_redis()
    r.incr(K_VERIFY_OUTCOME.format(outcome=outcome), 1)

def increment_verification_skipped() -> None:
    r = get_redis()
    r.incr(K_VERIFY_SKIPPED, 1)

def increment_verification_stale() -> None:
    r = get_redis()
    r.incr(K_VERIFY_STALE, 1)

def increment_claim_outcome(outcome: str) -> None:
    r = get_redis()
    r.incr(K_CLAIM_OUTCOME.format(outcome=outcome), 1)

def _record_latency(key: str, ms: int) -> None:
    try:
        ms = int(ms)
    except Exception:
        return
    r = get_redis()
    r.lpush(key, ms)
    r.ltrim(key, 0, _MAX_SAMPLES - 1)

def record_verification_latency(ms: int) -> None:
    _record_latency(K_VERIFY_LAT, ms)

def record_claim_latency(ms: int) -> None:
    _record_latency(K_CLAIM_LAT, ms)

def _read_latency_list(key: str) -> List[float]:
    r = get_redis()
    raw = r.lrange(key, 0, _MAX_SAMPLES - 1) or []
    out: List[float] = []
    for x in raw:
        try:
            out.append(float(x) / 1000.0)  # seconds
        except (TypeError, ValueError):
            continue
    return out

def _p50_p95(latencies_s: List[float]) -> Tuple[float, float]:
    if not latencies_s:
        return 0.0, 0.0
    return _percentile(latencies_s, 0.50), _percentile(latencies_s, 0.95)

def _read_counters(template: str, outcomes) -> Dict[str, int]:
    r = get_redis()
    return {o: int(r.get(template.format(outcome=o)) or 0) for o in outcomes}

def snapshot() -> dict:
    """
    Counters and latency percentiles (seconds) for both remote calls.
    Shaped for the /admin/metrics endpoint.
    """
    r = get_redis()

    verify = _read_counters(K_VERIFY_OUTCOME, VERIFY_OUTCOMES)
    claim = _read_counters(K_CLAIM_OUTCOME, CLAIM_OUTCOMES)

    p50_v, p95_v = _p50_p95(_read_latency_list(K_VERIFY_LAT))
    p50_c, p95_c = _p50_p95(_read_latency_list(K_CLAIM_LAT))

    claim_total = sum(claim.values())
    claim_rate = (claim["SUCCESS"] / claim_total) * 100.0 if claim_total else 0.0

    return {
        "verification": {
            "outcomes": verify,
            "skipped_cached": int(r.get(K_VERIFY_SKIPPED) or 0),
            "discarded_stale": int(r.get(K_VERIFY_STALE) or 0),
            "p50_latency": round(p50_v, 3),
            "p95_latency": round(p95_v, 3),
        },
        "submission": {
            "outcomes": claim,
            "success_rate": round(claim_rate, 3),
            "p50_latency": round(p50_c, 3),
            "p95_latency": round(p95_c, 3),
        },
        "snapshot_at": _now_s(),
    }
