import logging
from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded
from supabase import Client

from app.config import settings
from app.database.supabase_client import get_supabase
from app.core.exceptions import InvalidInvocation, InvalidRange, InvalidRole, InvalidTransition
from app.modules.auth import routes as auth_routes
from app.modules.churches import routes as churches_routes
from app.modules.members import routes as members_routes
from app.modules.invites import routes as invites_routes
from app.modules.join_requests import routes as join_requests_routes
from app.modules.ministries import routes as ministries_routes
from app.modules.safety import routes as safety_routes

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)

limiter = Limiter(key_func=get_remote_address, default_limits=[settings.rate_limit])
app = FastAPI(
    title=settings.app_name,
    debug=settings.debug,
    redirect_slashes=False,
)
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


@app.exception_handler(InvalidRole)
@app.exception_handler(InvalidRange)
async def validation_error_handler(request: Request, exc: Exception):
    return JSONResponse(status_code=400, content={"detail": str(exc)})


@app.exception_handler(InvalidTransition)
async def transition_error_handler(request: Request, exc: InvalidTransition):
    return JSONResponse(status_code=409, content={"detail": str(exc)})


@app.exception_handler(InvalidInvocation)
async def invocation_error_handler(request: Request, exc: InvalidInvocation):
    logger.error("Permission check misuse on %s %s: %s", request.method, request.url.path, exc)
    if settings.is_production:
        return JSONResponse(status_code=500, content={"detail": "Internal server error"})
    return JSONResponse(status_code=500, content={"detail": str(exc)})


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled exception: %s", exc)
    if settings.is_production:
        return JSONResponse(status_code=500, content={"detail": "Internal server error"})
    return JSONResponse(status_code=500, content={"detail": str(exc)})


class SecurityHeadersMiddleware:
    def __init__(self, app):
        self.app = app

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        async def send_with_headers(message):
            if message["type"] == "http.response.start":
                message.setdefault("headers", [])
                message["headers"].extend([
                    (b"X-Content-Type-Options", b"nosniff"),
                    (b"X-Frame-Options", b"DENY"),
                    (b"X-XSS-Protection", b"1; mode=block"),
                ])
            await send(message)

        await self.app(scope, receive, send_with_headers)


app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_cors_origins_list(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include module routes
app.include_router(auth_routes.router, prefix="/api/v1")
app.include_router(churches_routes.router, prefix="/api/v1")
app.include_router(members_routes.router, prefix="/api/v1")
app.include_router(invites_routes.router, prefix="/api/v1")
app.include_router(invites_routes.join_router, prefix="/api/v1")
app.include_router(join_requests_routes.router, prefix="/api/v1")
app.include_router(ministries_routes.router, prefix="/api/v1")
app.include_router(safety_routes.router, prefix="/api/v1")


@app.on_event("startup")
async def startup_event():
    logger.info("Application startup (%s)", settings.environment)


@app.on_event("shutdown")
async def shutdown_event():
    logger.info("Application shutdown")


@app.get("/")
async def root():
    return {"message": f"Welcome to {settings.app_name}", "status": "healthy"}


@app.get("/health")
@limiter.exempt
async def health():
    return {"status": "healthy"}


@app.get("/ready")
@limiter.exempt
async def ready(supabase: Client = Depends(get_supabase)):
    """Readiness probe: the churches table must answer a one-row query."""
    try:
        supabase.table("churches").select("id").limit(1).execute()
    except Exception as e:
        logger.warning("Readiness check failed: %s", e)
        return JSONResponse(status_code=503, content={"status": "unavailable"})
    return {"status": "ready"}
