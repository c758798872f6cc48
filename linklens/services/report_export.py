"""
Report export: serialize one analysis to the downloadable JSON artifact.
The export is one-way; nothing reads these files back.
"""

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional, Union

from linklens.config import settings
from linklens.schemas import SecurityAnalysis

logger = logging.getLogger(__name__)

REPORT_FIELDS = (
    "url",
    "timestamp",
    "safetyScore",
    "status",
    "ssl",
    "threats",
    "aiAnalysis",
    "recommendations",
)


def build_report(analysis: SecurityAnalysis) -> Dict[str, Any]:
    data = analysis.model_dump(mode="json", by_alias=True)
    return {key: data[key] for key in REPORT_FIELDS}


def render_report(analysis: SecurityAnalysis) -> str:
    return json.dumps(build_report(analysis), indent=2)


def report_filename(exported_at: Optional[datetime] = None) -> str:
    exported_at = exported_at or datetime.now(timezone.utc)
    return f"linklens-report-{int(exported_at.timestamp() * 1000)}.json"


def export_report(
    analysis: SecurityAnalysis,
    directory: Optional[Union[str, Path]] = None,
    exported_at: Optional[datetime] = None,
) -> Path:
    target_dir = Path(directory or settings.report_dir)
    target_dir.mkdir(parents=True, exist_ok=True)

    path = target_dir / report_filename(exported_at)
    path.write_text(render_report(analysis), encoding="utf-8")
    logger.info("Exported report for %s to %s", analysis.url, path)
    return path
