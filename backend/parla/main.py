# parla/main.py
import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from parla.config import settings
from parla.core.db import init_db, close_db
from parla.core.bootstrap import build_services
from parla.core.errors import ParlaError

from parla.api.v1.routers import auth, chat, sessions, settings as settings_router, speech

logger = logging.getLogger("uvicorn.error")

app = FastAPI(title=settings.APP_NAME)

# CORS (with Cookie)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Provider clients and pipeline services, built once per process
app.state.services = build_services(settings)

@app.exception_handler(ParlaError)
async def parla_error_handler(request: Request, exc: ParlaError):
    """Map pipeline errors to their HTTP status with a generic public message"""
    if exc.status_code >= 500:
        logger.error("[%s] %s %s -> %s", exc.code, request.method, request.url.path, exc)
    else:
        logger.info("[%s] %s %s -> %s", exc.code, request.method, request.url.path, exc)
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": {"code": exc.code, "message": exc.public_message}},
    )

@app.on_event("startup")
async def on_startup():
    logging.getLogger().setLevel(settings.log_level.upper())
    await init_db(generate_schemas=settings.db_generate_schemas)
    logger.info("[startup] %s ready (env=%s, chat_model=%s)", settings.APP_NAME, settings.env, settings.chat_model)

@app.on_event("shutdown")
async def on_shutdown():
    await close_db()

# REST
app.include_router(auth.router, prefix="/api/v1")
app.include_router(chat.router, prefix="/api/v1")
app.include_router(sessions.router, prefix="/api/v1")
app.include_router(settings_router.router, prefix="/api/v1")
app.include_router(speech.router, prefix="/api/v1")

@app.get("/healthz")
def healthz():
    return {"ok": True}
