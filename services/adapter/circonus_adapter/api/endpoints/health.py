from fastapi import APIRouter, Request, Response

router = APIRouter()


@router.get("/healthz")
async def healthz(request: Request):
    refresher = getattr(request.app.state, "refresher", None)
    return {
        "status": "ok",
        "refresher_running": bool(refresher and refresher.running),
    }


@router.get("/readyz")
async def readyz(request: Request):
    if request.app.state.ready_event.is_set():
        return {
            "status": "ready",
            "metrics": len(request.app.state.store.snapshot().definitions),
        }
    return Response(status_code=503, content="not ready")
