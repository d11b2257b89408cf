"""
Unit Tests for report snapshots, CSV export and the printable page
"""
import csv
import io
from datetime import date, datetime

import pytest
import pytz

from complaint_desk.schemas.complaint import (
    Complaint,
    ComplaintCategory,
    ComplaintStatus,
)
from complaint_desk.schemas.report import ReportFilter
from complaint_desk.utils.report_builder import (
    CSV_HEADERS,
    build_report,
    render_print,
    report_filename,
    to_csv,
)

GENERATED_AT = datetime(2024, 6, 5, 12, 0, tzinfo=pytz.utc)


def make(description, submitted, status=ComplaintStatus.SUBMITTED,
         category=ComplaintCategory.ACADEMIC, resolved=None, name='Ada Okoro') -> Complaint:
    return Complaint(
        student_name=name,
        student_id='U2021/5570009',
        category=category,
        description=description,
        status=status,
        submitted_at=submitted,
        resolved_at=resolved,
    )


@pytest.fixture
def complaints():
    return [
        make('May complaint', datetime(2024, 5, 20, 10, 0, tzinfo=pytz.utc),
             status=ComplaintStatus.RESOLVED, category=ComplaintCategory.FACILITIES,
             resolved=datetime(2024, 5, 22, 11, 0, tzinfo=pytz.utc)),
        make('Late on the last day', datetime(2024, 5, 31, 23, 59, tzinfo=pytz.utc)),
        make('June complaint', datetime(2024, 6, 1, 0, 0, tzinfo=pytz.utc)),
        make('April complaint', datetime(2024, 4, 15, 15, 0, tzinfo=pytz.utc),
             status=ComplaintStatus.CLOSED),
    ]


class TestBuildReport:
    def test_default_filter_selects_everything(self, complaints):
        snapshot = build_report(complaints, ReportFilter(), GENERATED_AT)
        assert len(snapshot) == 4

    def test_date_range_is_inclusive_by_calendar_day(self, complaints):
        report_filter = ReportFilter(start_date=date(2024, 5, 20), end_date=date(2024, 5, 31))

        snapshot = build_report(complaints, report_filter, GENERATED_AT)

        assert [c.description for c in snapshot.complaints] == [
            'May complaint', 'Late on the last day',
        ]

    def test_open_start(self, complaints):
        snapshot = build_report(complaints, ReportFilter(end_date=date(2024, 4, 30)), GENERATED_AT)
        assert [c.description for c in snapshot.complaints] == ['April complaint']

    def test_status_and_category_selection(self, complaints):
        report_filter = ReportFilter(
            statuses=[ComplaintStatus.RESOLVED, ComplaintStatus.CLOSED],
            categories=[ComplaintCategory.FACILITIES],
        )
        snapshot = build_report(complaints, report_filter, GENERATED_AT)
        assert [c.description for c in snapshot.complaints] == ['May complaint']

    def test_empty_selection_yields_empty_report(self, complaints):
        snapshot = build_report(complaints, ReportFilter(statuses=[]), GENERATED_AT)
        assert len(snapshot) == 0

    def test_timezone_moves_calendar_day(self, complaints):
        """23:59 UTC on 31 May is already 1 June in Lagos"""
        report_filter = ReportFilter(start_date=date(2024, 6, 1))
        snapshot = build_report(complaints, report_filter, GENERATED_AT, timezone='Africa/Lagos')
        assert {c.description for c in snapshot.complaints} == {
            'Late on the last day', 'June complaint',
        }

    def test_snapshot_is_frozen(self, complaints):
        snapshot = build_report(complaints, ReportFilter(), GENERATED_AT)
        complaints.append(make('Added later', GENERATED_AT))
        assert len(snapshot) == 4
        with pytest.raises(Exception):
            snapshot.complaints = ()


class TestCsv:
    def test_header_row(self, complaints):
        text = to_csv(build_report([], ReportFilter(), GENERATED_AT))
        assert text == ','.join(CSV_HEADERS)

    def test_rows_parse_back(self, complaints):
        complaints[0] = complaints[0].model_copy(
            update={'description': 'Said "urgent", then left\nsecond line', 'student_name': 'Okoro, Ada'}
        )
        text = to_csv(build_report(complaints, ReportFilter(), GENERATED_AT))

        rows = list(csv.reader(io.StringIO(text)))

        assert rows[0] == CSV_HEADERS
        assert len(rows) == 5
        first = rows[1]
        assert first[0] == complaints[0].id
        assert first[1] == 'Okoro, Ada'
        assert first[3] == 'Facilities'
        assert first[4] == 'Resolved'
        assert first[5] == '2024-05-20T10:00:00.000Z'
        assert first[6] == '2024-05-22T11:00:00.000Z'
        assert first[7] == 'Said "urgent", then left\nsecond line'

    def test_unresolved_shows_not_applicable(self, complaints):
        text = to_csv(build_report(complaints[1:2], ReportFilter(), GENERATED_AT))
        row = list(csv.reader(io.StringIO(text)))[1]
        assert row[6] == 'N/A'

    def test_description_always_quoted(self, complaints):
        text = to_csv(build_report(complaints[2:3], ReportFilter(), GENERATED_AT))
        assert text.splitlines()[1].endswith('"June complaint"')

    def test_filename_uses_date(self):
        assert report_filename(date(2024, 6, 5)) == 'complaint_report_2024-06-05.csv'


class TestPrint:
    def test_renders_rows_escaped(self, complaints):
        complaints[1] = complaints[1].model_copy(update={'description': '<b>bold</b>'})
        html = render_print(build_report(complaints, ReportFilter(), GENERATED_AT))

        assert '<table>' in html
        assert complaints[0].id in html
        assert '&lt;b&gt;bold&lt;/b&gt;' in html
        assert '<b>bold</b>' not in html

    def test_empty_report_message(self):
        html = render_print(build_report([], ReportFilter(), GENERATED_AT))
        assert 'No complaints match the selected filters.' in html
