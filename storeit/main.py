import logging
import os

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, RedirectResponse

from storeit.shared.config import settings
from storeit.shared.errors import StoreItError, LoginRequired
from storeit.shared.http import fail, fail_from

# Routers Import
from storeit.users.api import router as auth_router, views as auth_views
from storeit.files.api import router as files_router
from storeit.pages.api import router as pages_router

logging.basicConfig(level=settings.LOG_LEVEL)
log = logging.getLogger("storeit")

TAGS_METADATA = [
    {"name": "Auth", "description": "Email one-time-code sign-up, sign-in and sessions"},
    {"name": "Files", "description": "Upload, list, rename, share and delete files"},
    {"name": "Pages", "description": "View-models for the app's screens"},
    {"name": "Health", "description": "Service health"},
]

app = FastAPI(
    title="StoreIt",
    version="0.1.0",
    description="Cloud file storage on a backend-as-a-service.",
    openapi_tags=TAGS_METADATA,
)


@app.middleware("http")
async def log_request_info(request: Request, call_next):
    client_ip = request.client.host if request.client else "-"
    log.info(f"Request from IP: {client_ip} - {request.method} {request.url.path}")
    return await call_next(request)


@app.exception_handler(LoginRequired)
async def _login_required(request: Request, exc: LoginRequired):
    return RedirectResponse(settings.LOGIN_PATH, status_code=303)


@app.exception_handler(StoreItError)
async def _storeit_error(request: Request, exc: StoreItError):
    return JSONResponse(status_code=exc.status, content=fail_from(exc))


# ---- DEV-ONLY error handler (shows the real error instead of a bare 500) ----
if os.getenv("ENV", settings.ENV) == "dev":
    @app.exception_handler(Exception)
    async def _dev_ex_handler(request: Request, exc: Exception):
        log.exception("unhandled error")
        return JSONResponse(status_code=500, content=fail(str(exc), code="internal_error"))


@app.get("/healthz", tags=["Health"])
def healthz():
    return {"ok": True, "backend": settings.BACKEND}


app.include_router(auth_router)
app.include_router(auth_views)
app.include_router(files_router)
app.include_router(pages_router)

if settings.BACKEND == "local":
    from storeit.backend.local.api import router as local_storage_router
    app.include_router(local_storage_router)
