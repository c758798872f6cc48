from typing import Iterable, List, Union

from linklens.schemas import (
    HistorySort,
    HistorySummary,
    ScanStatus,
    SecurityAnalysis,
    StatusFilter,
)


def query_history(
    history: Iterable[SecurityAnalysis],
    search_term: str = "",
    status_filter: Union[StatusFilter, str] = StatusFilter.ALL,
    sort_key: Union[HistorySort, str] = HistorySort.DATE,
) -> List[SecurityAnalysis]:
    """
    Filter then sort scan history without touching the input.

    Date and score sort descending, url ascending ignoring case. Python's
    sort is stable, so equal keys keep their original relative order.
    """
    status_filter = StatusFilter(status_filter)
    sort_key = HistorySort(sort_key)
    needle = (search_term or "").lower()

    filtered = [
        scan
        for scan in history
        if needle in scan.url.lower()
        and (status_filter == StatusFilter.ALL or scan.status.value == status_filter.value)
    ]

    if sort_key == HistorySort.DATE:
        return sorted(filtered, key=lambda scan: scan.timestamp, reverse=True)
    if sort_key == HistorySort.SCORE:
        return sorted(filtered, key=lambda scan: scan.safety_score, reverse=True)
    # Case-insensitive first, so "alpha" < "beta" < "Zeta"; exact text breaks ties
    return sorted(filtered, key=lambda scan: (scan.url.casefold(), scan.url))


def summarize_history(history: Iterable[SecurityAnalysis]) -> HistorySummary:
    scans = list(history)
    counts = {status: 0 for status in ScanStatus}
    for scan in scans:
        counts[scan.status] += 1

    average = sum(scan.safety_score for scan in scans) / len(scans) if scans else 0.0
    return HistorySummary(
        total=len(scans),
        safe=counts[ScanStatus.SAFE],
        warning=counts[ScanStatus.WARNING],
        dangerous=counts[ScanStatus.DANGEROUS],
        unknown=counts[ScanStatus.UNKNOWN],
        average_score=round(average, 1),
    )
