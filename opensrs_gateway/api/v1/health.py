"""Health endpoints"""
from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from opensrs_gateway.api.responses import now_iso, result_status
from opensrs_gateway.core.config import settings

router = APIRouter()


@router.get("/health")
async def health_check(request: Request):
    """Liveness and configuration summary"""
    client = getattr(request.app.state, "opensrs_client", None)
    return {
        "status": "healthy",
        "service": settings.APP_NAME,
        "version": settings.VERSION,
        "opensrs": {
            "configured": client is not None,
            "testMode": settings.OPENSRS_TEST_MODE,
            "host": client.host if client is not None else None,
        },
        "timestamp": now_iso(),
    }


@router.get("/health/connectivity")
async def connectivity_check(request: Request):
    """Round-trip a GET_BALANCE to prove credentials and network work"""
    client = getattr(request.app.state, "opensrs_client", None)
    if client is None:
        error = getattr(request.app.state, "opensrs_error", None)
        return JSONResponse(
            status_code=500,
            content={
                "success": False,
                "error": str(error) if error else "OpenSRS client is not configured",
                "timestamp": now_iso(),
            },
        )

    result = await client.get_balance()
    body = {
        "success": result.success,
        "responseCode": result.response_code,
        "responseText": result.response_text,
        "host": client.host,
        "timestamp": now_iso(),
    }
    if not result.success:
        body["error"] = result.error
    return JSONResponse(status_code=result_status(result), content=body)
