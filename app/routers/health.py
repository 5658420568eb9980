from fastapi import APIRouter, Request

router = APIRouter(tags=["health"])


@router.get("/health", summary="Liveness probe")
async def health(request: Request):
    settings = request.app.state.settings
    provider = request.app.state.rate_provider
    return {
        "status": "ok",
        "version": settings.version,
        "live_rates": provider.live_enabled,
        "rates_cached": provider.cache.snapshot is not None,
    }
