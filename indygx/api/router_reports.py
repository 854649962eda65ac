"""
Report endpoints — ecosystem report as JSON or Excel download.
"""
from __future__ import annotations

import os
import tempfile

from fastapi import APIRouter, BackgroundTasks, Depends
from fastapi.responses import FileResponse, JSONResponse

from indygx.config import REPORTS_FOLDER
from indygx.data.store import EcosystemStore
from indygx.data.schemas import OrganizationFilter
from indygx.api.dependencies import get_store, parse_filter
from indygx.reports import ecosystem_report

router = APIRouter(prefix="/api/reports", tags=["reports"])


@router.get("/ecosystem")
def ecosystem_report_json(
    store: EcosystemStore = Depends(get_store),
    org_filter: OrganizationFilter | None = Depends(parse_filter),
):
    return JSONResponse(content=ecosystem_report.generate_json(store, org_filter))


@router.get("/excel")
def ecosystem_report_excel(
    background_tasks: BackgroundTasks,
    store: EcosystemStore = Depends(get_store),
    org_filter: OrganizationFilter | None = Depends(parse_filter),
):
    """Ecosystem report as an Excel download.

    Each request writes its own workbook, removed once the response is sent.
    """
    suffix = org_filter.type.value if org_filter and org_filter.type else "all"
    REPORTS_FOLDER.mkdir(parents=True, exist_ok=True)
    fd, tmp_path = tempfile.mkstemp(suffix=".xlsx", prefix="ecosystem_", dir=REPORTS_FOLDER)
    os.close(fd)
    out_path = ecosystem_report.generate_excel(store, tmp_path, org_filter)
    background_tasks.add_task(out_path.unlink, missing_ok=True)
    return FileResponse(
        path=str(out_path),
        filename=f"Ecosystem_Report_{suffix}.xlsx",
        media_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    )
