"""Health and readiness endpoints."""

from fastapi import APIRouter, HTTPException, Request

from ..schemas import HealthOut

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthOut)
def health(request: Request):
    """Liveness probe — ok mientras el proceso sirve HTTP."""
    state = request.app.state
    receiver = state.receiver
    return HealthOut(
        status="ok",
        running=receiver.is_running if receiver else False,
        connected=receiver.is_connected if receiver else False,
        nodes=len(state.sensor_registry),
        sensors=state.sensor_registry.sensor_count(),
        series=len(state.gauge_binding.series()),
    )


@router.get("/ready")
def ready(request: Request):
    """Readiness probe — requiere conexión al broker."""
    receiver = request.app.state.receiver
    if receiver is None or not receiver.is_connected:
        raise HTTPException(status_code=503, detail="not ready")
    return {"status": "ready"}


@router.get("/stats")
def stats(request: Request):
    """Estadísticas del receptor: handler, cola y desalojo."""
    receiver = request.app.state.receiver
    if receiver is None:
        return {"running": False}
    return receiver.stats
