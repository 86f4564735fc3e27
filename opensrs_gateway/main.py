"""Main FastAPI application"""
import asyncio
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from opensrs_gateway.api.responses import OpenSRSRequestFailed, failure_body, now_iso, result_status
from opensrs_gateway.core.config import settings
from opensrs_gateway.core.init import init_system
from opensrs_gateway.core.redis import redis_client
from opensrs_gateway.opensrs.client import OpenSRSClient
from opensrs_gateway.opensrs.errors import OpenSRSConfigError, OpenSRSError
from opensrs_gateway.services.cache_service import create_domain_cache, run_sweeper

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    # Startup
    if settings.CACHE_BACKEND == "redis":
        await redis_client.connect()
    await init_system()

    app.state.domain_cache = create_domain_cache()
    app.state.opensrs_client = None
    app.state.opensrs_error = None
    try:
        app.state.opensrs_client = OpenSRSClient.from_settings(cache=app.state.domain_cache)
    except OpenSRSConfigError as e:
        # Local endpoints stay usable; OpenSRS routes answer 500 with this error
        logger.error("OpenSRS client not configured: %s", e.message)
        app.state.opensrs_error = e

    sweeper = asyncio.create_task(
        run_sweeper(app.state.domain_cache, settings.CACHE_SWEEP_INTERVAL_SECONDS)
    )
    yield
    # Shutdown
    sweeper.cancel()
    try:
        await sweeper
    except asyncio.CancelledError:
        pass
    if app.state.opensrs_client is not None:
        await app.state.opensrs_client.aclose()
    await redis_client.disconnect()


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.VERSION,
    debug=settings.DEBUG,
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    details = [
        {"loc": list(error.get("loc", ())), "msg": error.get("msg"), "type": error.get("type")}
        for error in exc.errors()
    ]
    return JSONResponse(
        status_code=400,
        content=jsonable_encoder(failure_body("Validation failed", details=details)),
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content=failure_body(str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(OpenSRSError)
async def opensrs_error_handler(request: Request, exc: OpenSRSError):
    details = dict(exc.details)
    result = details.pop("result", None)
    status_code = exc.status_code
    if result is not None:
        status_code = result_status(result)
    if status_code < 500:
        logger.warning("%s: %s", type(exc).__name__, exc.message)
    else:
        logger.error("%s: %s", type(exc).__name__, exc.message)
    return JSONResponse(
        status_code=status_code,
        content=jsonable_encoder(failure_body(exc.message, result=result, **details)),
    )


@app.exception_handler(OpenSRSRequestFailed)
async def opensrs_request_failed_handler(request: Request, exc: OpenSRSRequestFailed):
    logger.warning(
        "%s (%s %s)", exc.message, exc.result.response_code, exc.result.response_text
    )
    return JSONResponse(status_code=exc.status_code, content=jsonable_encoder(exc.body()))


# Import and include routers
from opensrs_gateway.api.v1 import (  # noqa: E402
    account,
    auth,
    cache,
    dns,
    domains,
    health,
    nameservers,
    pricing,
    suggestions,
    transfers,
    user_domains,
    users,
)

# Local mirror routes first: /domains/expiring and /domains/search must win over /domains/{domain}
app.include_router(user_domains.router, prefix="/api", tags=["user-domains"])
app.include_router(domains.router, prefix="/api/domains", tags=["domains"])
app.include_router(dns.router, prefix="/api/dns", tags=["dns"])
app.include_router(nameservers.router, prefix="/api/nameservers", tags=["nameservers"])
app.include_router(transfers.router, prefix="/api/transfers", tags=["transfers"])
app.include_router(suggestions.router, prefix="/api", tags=["suggestions"])
app.include_router(pricing.router, prefix="/api/pricing", tags=["pricing"])
app.include_router(account.router, prefix="/api/account", tags=["account"])
app.include_router(cache.router, prefix="/api/cache", tags=["cache"])
app.include_router(users.router, prefix="/api/users", tags=["users"])
app.include_router(auth.router, prefix="/api/auth", tags=["auth"])
app.include_router(health.router, prefix="/api", tags=["health"])


@app.get("/api")
async def api_index():
    """Endpoint groups served by the gateway"""
    return {
        "message": f"{settings.APP_NAME} API",
        "version": settings.VERSION,
        "environment": "test" if settings.OPENSRS_TEST_MODE else "live",
        "endpoints": {
            "domains": "/api/domains",
            "dns": "/api/dns",
            "nameservers": "/api/nameservers",
            "transfers": "/api/transfers",
            "suggestions": "/api/suggestions",
            "pricing": "/api/pricing",
            "account": "/api/account",
            "cache": "/api/cache",
            "users": "/api/users",
            "auth": "/api/auth",
            "userDomains": "/api/user/{id}/domains",
            "health": "/api/health",
        },
        "docs": "/docs",
        "timestamp": now_iso(),
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("opensrs_gateway.main:app", host=settings.HOST, port=settings.PORT)
