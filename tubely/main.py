import logging
from contextlib import asynccontextmanager
from pathlib import Path
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from tubely.config import get_settings
from tubely.errors import BadRequest, TubelyError, Unauthenticated
from tubely.routers import auth, uploads, videos
from tubely.services.upload_pipeline import build_upload_pipeline

settings = get_settings()

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# StaticFiles checks the directory when mounted
Path(settings.assets_root).mkdir(parents=True, exist_ok=True)


@asynccontextmanager
async def lifespan(app: FastAPI):
    app.state.upload_pipeline = build_upload_pipeline(settings)
    logger.info("Serving assets from %s", Path(settings.assets_root).resolve())
    yield


app = FastAPI(title="Tubely API", version="1.0.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.frontend_url],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(TubelyError)
async def tubely_error_handler(request: Request, exc: TubelyError):
    log = logger.warning if exc.status_code < 500 else logger.error
    log("%s %s failed: %s: %s", request.method, request.url.path, exc.kind, exc.detail or exc.message)
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, Unauthenticated) else None
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.message, "kind": exc.kind},
        headers=headers,
    )


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    fields = ", ".join(".".join(str(p) for p in err["loc"] if p != "body") for err in exc.errors())
    return await tubely_error_handler(request, BadRequest(f"Invalid request: {fields}", detail=str(exc.errors())))


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.error("%s %s failed with unhandled error", request.method, request.url.path, exc_info=exc)
    return JSONResponse(
        status_code=500,
        content={"error": TubelyError.message, "kind": TubelyError.kind},
    )


app.include_router(auth.router)
app.include_router(videos.router)
app.include_router(uploads.router)
app.mount("/assets", StaticFiles(directory=settings.assets_root), name="assets")


@app.get("/healthz")
def healthz():
    return {"status": "ok"}
