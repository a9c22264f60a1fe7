from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from core import config, db
from speakers import router as speakers_router

OPENAPI_URL = "/swagger/v1/swagger.json"
DOCS_URL = "/swagger"


@asynccontextmanager
async def lifespan(_: FastAPI):
    config.configure_logging()
    # One engine per process; sessions are per request.
    db.init_engine()
    try:
        await db.create_schema(reset=config.reset_database_on_startup())
        yield
    finally:
        await db.close_engine()


def create_app() -> FastAPI:
    app = FastAPI(
        title="Speaker API",
        version="v1",
        lifespan=lifespan,
        openapi_url=OPENAPI_URL,
        docs_url=DOCS_URL,
        redoc_url=None,
    )

    # Allow local frontend dev server to call this API from the browser.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_allow_origins(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(speakers_router.router, prefix="/api", tags=["speakers"])

    @app.get("/health")
    def health() -> dict:
        return {"status": "ok"}

    @app.get("/")
    def root() -> dict:
        return {"message": "speaker api", "docs": DOCS_URL}

    return app


app = create_app()
