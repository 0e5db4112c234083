# backend/course_eval/main.py

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware

from .api.endpoints import admin_router, users_router
from .api.responses import install_exception_handlers
from .core.config import settings
from .core.store import RATINGS, SupabaseStore

# -------------------------------------------------------------------
# Logging
# -------------------------------------------------------------------
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL, logging.INFO),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Application startup…")

    # A store injected by the caller (tests, scripts) wins over Supabase
    if getattr(app.state, "store", None) is None:
        url, key = settings.supabase_credentials()
        app.state.store = SupabaseStore.connect(url, key)
        logger.info("Supabase store attached to app.state.store")

        # Quick probe: tiny exact count to confirm RLS/keys are correct.
        try:
            logger.info("[probe] ratings count=%s", app.state.store.count(RATINGS))
        except Exception as e:
            logger.warning("[probe] count failed: %r", e)

    yield
    logger.info("Application shutdown.")


def create_app(store=None) -> FastAPI:
    app = FastAPI(
        title="Course Evaluation API",
        description="Student ratings, comments and administrator insights/reports.",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.store = store

    # -------------------------------------------------------------------
    # CORS
    # -------------------------------------------------------------------
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins(),
        allow_origin_regex=r"https?://(localhost|127\.0\.0\.1)(:\d+)?",
        allow_credentials=True,  # refresh token travels as a cookie
        allow_methods=["*"],
        allow_headers=["*"],
        max_age=86400,
    )
    install_exception_handlers(app)

    # -------------------------------------------------------------------
    # Health + Root
    # -------------------------------------------------------------------
    @app.get("/healthz")
    def healthz(request: Request):
        """
        Liveness/readiness probe. Also verifies a store read briefly.
        """
        store = getattr(request.app.state, "store", None)
        if store is None:
            raise HTTPException(status_code=500, detail="Store missing")

        try:
            ratings = store.count(RATINGS)
        except Exception as e:
            logger.warning("[healthz] ratings count failed: %r", e)
            ratings = -1

        return {"ok": True, "ratingsCount": ratings}

    @app.get("/")
    def read_root():
        return {"message": "Welcome to the Course Evaluation API"}

    # -------------------------------------------------------------------
    # Routers
    # -------------------------------------------------------------------
    app.include_router(users_router, prefix="/users")
    app.include_router(admin_router, prefix="/admin")
    return app


app = create_app()
