from typing import List

from fastapi import APIRouter, Depends, HTTPException, Response

from linklens.dependencies import get_account_store
from linklens.schemas import (
    Account,
    HistorySort,
    HistorySummary,
    SecurityAnalysis,
    StatusFilter,
)
from linklens.services.account_store import AccountStore
from linklens.services.history_query import query_history, summarize_history
from linklens.services.report_export import render_report, report_filename

router = APIRouter(
    prefix="/history",
    tags=["history"]
)


def get_active_account(store: AccountStore = Depends(get_account_store)) -> Account:
    account = store.active_account
    if account is None:
        raise HTTPException(status_code=401, detail="Sign in to view scan history")
    return account


def _find_scan(account: Account, analysis_id: str) -> SecurityAnalysis:
    for scan in account.scan_history:
        if scan.id == analysis_id:
            return scan
    raise HTTPException(status_code=404, detail="Analysis not found")


@router.get("/", response_model=List[SecurityAnalysis], response_model_by_alias=True)
def get_history(
    q: str = "",
    status: StatusFilter = StatusFilter.ALL,
    sort: HistorySort = HistorySort.DATE,
    account: Account = Depends(get_active_account),
):
    return query_history(account.scan_history, search_term=q, status_filter=status, sort_key=sort)


@router.get("/summary", response_model=HistorySummary, response_model_by_alias=True)
def get_history_summary(account: Account = Depends(get_active_account)):
    return summarize_history(account.scan_history)


@router.get("/{analysis_id}", response_model=SecurityAnalysis, response_model_by_alias=True)
def get_analysis(analysis_id: str, account: Account = Depends(get_active_account)):
    return _find_scan(account, analysis_id)


@router.get("/{analysis_id}/export")
def export_analysis(analysis_id: str, account: Account = Depends(get_active_account)):
    scan = _find_scan(account, analysis_id)
    return Response(
        render_report(scan),
        media_type="application/json",
        headers={"Content-Disposition": f"attachment; filename={report_filename()}"},
    )
