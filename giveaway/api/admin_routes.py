from fastapi import APIRouter, Depends
from giveaway.settings import settings
from giveaway.store.sessions import SessionRegistry, get_registry
import giveaway.observability.metrics as metrics

router = APIRouter(prefix="/admin", tags=["admin"])

@router.get("/metrics")
def get_metrics(registry: SessionRegistry = Depends(get_registry)):
    """Outcome counters for both remote calls plus live session count."""
    out = {"enabled": bool(settings.METRICS_ENABLED), "activeSessions": len(registry)}
    if not settings.METRICS_ENABLED:
        return out
    try:
        out.update(metrics.snapshot())
    except Exception as e:
        # Redis down: still answer with what we know
        out["error"] = f"{type(e).__name__}: {str(e)[:200]}"
    return out
