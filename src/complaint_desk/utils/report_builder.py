"""Reporting engine.

This module filters the complaint collection into report snapshots and
renders them as CSV or as a printable HTML page assembled with Jinja2.
"""

import logging
from datetime import date, datetime
from typing import Iterable, List

import jinja2
import pytz

from complaint_desk.config import APP_TIMEZONE
from complaint_desk.schemas.complaint import Complaint
from complaint_desk.schemas.report import ReportFilter, ReportSnapshot
from complaint_desk.utils.converters import format_timestamp

logger = logging.getLogger(__name__)

CSV_HEADERS = [
    "ID",
    "Student Name",
    "Student ID",
    "Category",
    "Status",
    "Submitted At",
    "Resolved At",
    "Description",
]
NOT_APPLICABLE = "N/A"

PRINT_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<title>Complaint Report</title>
<style>
body { font-family: sans-serif; margin: 2em; }
table { border-collapse: collapse; width: 100%; }
th, td { border: 1px solid #ccc; padding: 4px 8px; text-align: left; vertical-align: top; }
th { background: #f3f4f6; }
</style>
</head>
<body>
<h1>Complaint Report</h1>
<p>Generated {{ generated_at }}.</p>
<p>
Date range: {{ start_date or "any" }} to {{ end_date or "any" }}.
Statuses: {{ statuses | join(", ") or "none" }};
Categories: {{ categories | join(", ") or "none" }}.
</p>
{% if rows %}
<table>
<thead>
<tr>{% for header in headers %}<th>{{ header }}</th>{% endfor %}</tr>
</thead>
<tbody>
{% for row in rows %}
<tr>{% for cell in row %}<td>{{ cell }}</td>{% endfor %}</tr>
{% endfor %}
</tbody>
</table>
{% else %}
<p>No complaints match the selected filters.</p>
{% endif %}
</body>
</html>
"""

_environment = jinja2.Environment(autoescape=True)
_print_template = _environment.from_string(PRINT_TEMPLATE)


def submission_date(complaint: Complaint, timezone: str = APP_TIMEZONE) -> date:
    return complaint.submitted_at.astimezone(pytz.timezone(timezone)).date()


def matches_report_filter(
    complaint: Complaint,
    report_filter: ReportFilter,
    timezone: str = APP_TIMEZONE,
) -> bool:
    submitted = submission_date(complaint, timezone)
    if report_filter.start_date and submitted < report_filter.start_date:
        return False
    if report_filter.end_date and submitted > report_filter.end_date:
        return False
    if complaint.status not in report_filter.statuses:
        return False
    if complaint.category not in report_filter.categories:
        return False
    return True


def build_report(
    complaints: Iterable[Complaint],
    report_filter: ReportFilter,
    generated_at: datetime,
    timezone: str = APP_TIMEZONE,
) -> ReportSnapshot:
    """Take a snapshot of the complaints matching a report filter.

    Args:
        complaints: Full collection.
        report_filter: Date range and status/category selections.
        generated_at: Time the report is generated.
        timezone: Timezone whose calendar decides submission dates.

    Returns:
        A frozen ReportSnapshot, in collection order.
    """
    selected = tuple(
        c for c in complaints if matches_report_filter(c, report_filter, timezone)
    )
    logger.info("Report generated with %d complaints", len(selected))
    return ReportSnapshot(
        generated_at=generated_at,
        report_filter=report_filter.model_copy(deep=True),
        complaints=selected,
    )


def _csv_field(value: str) -> str:
    if any(ch in value for ch in (",", '"', "\n", "\r")):
        return '"' + value.replace('"', '""') + '"'
    return value


def _quoted(value: str) -> str:
    return '"' + value.replace('"', '""') + '"'


def report_row(complaint: Complaint) -> List[str]:
    return [
        complaint.id,
        complaint.student_name,
        complaint.student_id,
        complaint.category.value,
        complaint.status.value,
        format_timestamp(complaint.submitted_at),
        format_timestamp(complaint.resolved_at) if complaint.resolved_at else NOT_APPLICABLE,
        complaint.description,
    ]


def to_csv(snapshot: ReportSnapshot) -> str:
    """Render a snapshot as CSV.

    The description column is always quoted; other columns are quoted only
    when they contain a separator or a quote.
    """
    lines = [",".join(CSV_HEADERS)]
    for complaint in snapshot.complaints:
        *leading, description = report_row(complaint)
        lines.append(",".join([*(_csv_field(v) for v in leading), _quoted(description)]))
    return "\n".join(lines)


def report_filename(today: date) -> str:
    return f"complaint_report_{today.isoformat()}.csv"


def render_print(snapshot: ReportSnapshot) -> str:
    """Render a snapshot as a printable HTML page."""
    report_filter = snapshot.report_filter
    return _print_template.render(
        generated_at=format_timestamp(snapshot.generated_at),
        start_date=report_filter.start_date,
        end_date=report_filter.end_date,
        statuses=[s.value for s in report_filter.statuses],
        categories=[c.value for c in report_filter.categories],
        headers=CSV_HEADERS,
        rows=[report_row(c) for c in snapshot.complaints],
    )
