import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from linklens.config import settings
from linklens.database import Base, engine
from linklens.exceptions import AnalysisInProgressError
from linklens.routers.auth import router as auth_router
from linklens.routers.history import router as history_router
from linklens.routers.url_scanner import router as url_scanner_router

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(
    title="LinkLens URL Safety API",
    version="0.1.0",
    description="Heuristic URL safety analysis with per-account scan history",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("startup")
def create_tables():
    # Importing models registers the tables on Base.metadata
    import linklens.models  # noqa: F401

    Base.metadata.create_all(bind=engine)


@app.exception_handler(AnalysisInProgressError)
async def analysis_in_progress_handler(request: Request, exc: AnalysisInProgressError):
    return JSONResponse(status_code=409, content={"detail": str(exc)})


@app.get("/health")
async def health_check():
    return {"status": "ok"}


# Include the routers
app.include_router(url_scanner_router)
app.include_router(auth_router)
app.include_router(history_router)
