"""Report routes.

This module handles HTTP endpoints for generating report snapshots and
exporting them as CSV or as a printable page. Each request takes a fresh
snapshot of the collection.
"""

import logging

from fastapi import APIRouter
from fastapi.responses import HTMLResponse, Response

from complaint_desk.core.dependencies import AdminDep, ContextDep
from complaint_desk.core.context import AppContext
from complaint_desk.schemas.report import ReportFilter, ReportSnapshot
from complaint_desk.utils.report_builder import (
    build_report,
    render_print,
    report_filename,
    to_csv,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/reports", tags=["Reports"])


def _snapshot(context: AppContext, report_filter: ReportFilter) -> ReportSnapshot:
    return build_report(
        context.complaints.complaints,
        report_filter,
        generated_at=context.clock(),
        timezone=context.timezone,
    )


@router.post("/preview", summary="Generate report")
def preview_report(
    report_filter: ReportFilter,
    admin: AdminDep,
    context: ContextDep,
) -> ReportSnapshot:
    return _snapshot(context, report_filter)


@router.post("/csv", summary="Export report as CSV")
def export_csv(
    report_filter: ReportFilter,
    admin: AdminDep,
    context: ContextDep,
) -> Response:
    """Download the report as a CSV attachment named after today's date."""
    snapshot = _snapshot(context, report_filter)
    filename = report_filename(context.today())
    return Response(
        content=to_csv(snapshot),
        media_type="text/csv;charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.post("/print", summary="Printable report", response_class=HTMLResponse)
def print_report(
    report_filter: ReportFilter,
    admin: AdminDep,
    context: ContextDep,
) -> HTMLResponse:
    return HTMLResponse(render_print(_snapshot(context, report_filter)))
