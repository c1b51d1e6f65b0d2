# confession_board/main.py
"""
App FastAPI: lifespan (startup/shutdown), router de confesiones + middleware de trazas.
CORS lo resuelve el propio router (cabeceras fijas + OPTIONS → {}), sin CORSMiddleware.
"""
import logging, time

from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .core.config import settings
from .db.store import connect_store, disconnect_store
from .routes import confessions
from .routes.confessions import CORS_HEADERS
from .telemetry.logging import setup_logging

setup_logging()
http_logger = logging.getLogger("confession_board.http")

@asynccontextmanager
async def lifespan(app: FastAPI):
    connect_store()
    yield
    await disconnect_store()

app = FastAPI(title="Confession Board API", version="0.1.0", lifespan=lifespan)

# ---------------- Middleware de trazas ----------------
@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.time()
    try:
        response = await call_next(request)
        dur = round(time.time() - start, 4)
        http_logger.info(f"{request.method} {request.url.path} -> {response.status_code} in {dur}s")
        return response
    except Exception as e:
        dur = round(time.time() - start, 4)
        http_logger.exception(f"{request.method} {request.url.path} EXC after {dur}s: {e}")
        raise

# Cuerpo que no es un objeto JSON → 400 con la misma forma que el resto de errores
@app.exception_handler(RequestValidationError)
async def invalid_body(request: Request, exc: RequestValidationError):
    return JSONResponse(status_code=400, content={"error": "Invalid request body"}, headers=CORS_HEADERS)

# Cualquier método no registrado → 405 {"error"}; el resto de HTTPException conserva su forma
@app.exception_handler(StarletteHTTPException)
async def http_error(request: Request, exc: StarletteHTTPException):
    if exc.status_code == 405:
        return JSONResponse(status_code=405, content={"error": "Method not allowed"},
                            headers={**(exc.headers or {}), **CORS_HEADERS})
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail}, headers=exc.headers)

# ---------------- Healthcheck ----------------
@app.get("/health", tags=["misc"])
async def health():
    return {"ok": True}

# ---------------- Routers ----------------
app.include_router(confessions.router, prefix=settings.API_ENDPOINT, tags=["confessions"])
