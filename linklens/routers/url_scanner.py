import asyncio
import logging

from fastapi import APIRouter, Depends, HTTPException

from linklens.dependencies import get_account_store, get_analysis_engine
from linklens.exceptions import AnalysisInProgressError, ValidationError
from linklens.schemas import SecurityAnalysis, URLScanRequest
from linklens.services.account_store import AccountStore
from linklens.services.analysis_engine import AnalysisEngine, StageProgress

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/scan", tags=["url"])

# The engine models one in-flight analysis; extra submissions are refused here
_analysis_lock = asyncio.Lock()


def _log_progress(event: StageProgress) -> None:
    logger.debug("Analysis progress %.0f%%: %s", event.progress * 100, event.stage)


@router.post("/url", response_model=SecurityAnalysis, response_model_by_alias=True)
async def scan_url(
    payload: URLScanRequest,
    engine: AnalysisEngine = Depends(get_analysis_engine),
    store: AccountStore = Depends(get_account_store),
):
    """
    Analyze a URL and, when someone is signed in, save it to their history.
    """
    if _analysis_lock.locked():
        raise AnalysisInProgressError("Another analysis is already running")

    async with _analysis_lock:
        try:
            analysis = await engine.analyze(payload.url, on_progress=_log_progress)
        except ValidationError as exc:
            raise HTTPException(status_code=422, detail=str(exc))

    if store.active_account is not None:
        store.record_scan(analysis)
    return analysis
