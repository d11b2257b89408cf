"""
Unit Tests for the complaint command handler
"""
from datetime import date, datetime, timedelta

import pytest
import pytz

from complaint_desk.schemas.complaint import (
    Complaint,
    ComplaintCategory,
    ComplaintStatus,
    HistoryEntry,
)
from complaint_desk.utils.complaint_commands import (
    DETAILS_UPDATED_NOTE,
    AddComplaint,
    ChangeStatus,
    EditNotes,
    MarkRead,
    ReplaceAll,
    apply_command,
    history_note,
)

T0 = datetime(2024, 5, 1, 9, 0, tzinfo=pytz.utc)


def make_complaint(**overrides) -> Complaint:
    fields = dict(
        student_name='Ada Okoro',
        student_id='U2021/5570009',
        category=ComplaintCategory.ACADEMIC,
        description='Grade missing',
        submitted_at=T0,
        history=[HistoryEntry(status=ComplaintStatus.SUBMITTED, changed_at=T0)],
    )
    fields.update(overrides)
    return Complaint(**fields)


def change(complaint_id: str, status: ComplaintStatus, at: datetime, due=None) -> ChangeStatus:
    return ChangeStatus(complaint_id=complaint_id, status=status, due_date=due, changed_at=at)


class TestAddComplaint:
    def test_new_complaint_goes_first(self):
        """Newest creation is at the front of the collection"""
        existing = make_complaint()
        new = make_complaint(description='Projector broken')

        result = apply_command([existing], AddComplaint(new))

        assert [c.id for c in result] == [new.id, existing.id]

    def test_input_list_untouched(self):
        original = [make_complaint()]
        apply_command(original, AddComplaint(make_complaint()))
        assert len(original) == 1


class TestChangeStatus:
    def test_appends_history_with_transition_note(self):
        complaint = make_complaint()
        at = T0 + timedelta(days=1)

        [updated] = apply_command([complaint], change(complaint.id, ComplaintStatus.IN_PROGRESS, at))

        assert updated.status == ComplaintStatus.IN_PROGRESS
        assert len(updated.history) == 2
        entry = updated.history[-1]
        assert entry.status == ComplaintStatus.IN_PROGRESS
        assert entry.changed_at == at
        assert entry.notes == 'Status changed from Submitted to In Progress.'

    def test_same_status_still_logged(self):
        """Re-saving with the same status records a details update"""
        complaint = make_complaint()

        [updated] = apply_command(
            [complaint],
            change(complaint.id, ComplaintStatus.SUBMITTED, T0, due=date(2024, 6, 1)),
        )

        assert len(updated.history) == 2
        assert updated.history[-1].notes == DETAILS_UPDATED_NOTE
        assert updated.due_date == date(2024, 6, 1)

    def test_original_complaint_not_mutated(self):
        complaint = make_complaint()
        apply_command([complaint], change(complaint.id, ComplaintStatus.RESOLVED, T0))
        assert complaint.status == ComplaintStatus.SUBMITTED
        assert len(complaint.history) == 1
        assert complaint.resolved_at is None

    @pytest.mark.parametrize('terminal', [ComplaintStatus.RESOLVED, ComplaintStatus.CLOSED])
    def test_resolved_at_set_on_first_terminal_status(self, terminal):
        complaint = make_complaint()
        at = T0 + timedelta(hours=5)

        [updated] = apply_command([complaint], change(complaint.id, terminal, at))

        assert updated.resolved_at == at

    def test_resolved_at_never_changes_or_clears(self):
        """Reopening or closing later keeps the first resolution time"""
        complaint = make_complaint()
        first = T0 + timedelta(days=1)
        collection = apply_command([complaint], change(complaint.id, ComplaintStatus.RESOLVED, first))
        collection = apply_command(
            collection, change(complaint.id, ComplaintStatus.IN_PROGRESS, first + timedelta(days=1))
        )
        assert collection[0].resolved_at == first

        collection = apply_command(
            collection, change(complaint.id, ComplaintStatus.CLOSED, first + timedelta(days=2))
        )
        assert collection[0].resolved_at == first
        assert [e.status for e in collection[0].history] == [
            ComplaintStatus.SUBMITTED,
            ComplaintStatus.RESOLVED,
            ComplaintStatus.IN_PROGRESS,
            ComplaintStatus.CLOSED,
        ]

    def test_any_transition_allowed(self):
        complaint = make_complaint(status=ComplaintStatus.CLOSED)
        [updated] = apply_command([complaint], change(complaint.id, ComplaintStatus.SUBMITTED, T0))
        assert updated.status == ComplaintStatus.SUBMITTED

    def test_none_due_date_clears_it(self):
        complaint = make_complaint(due_date=date(2024, 6, 1))
        [updated] = apply_command([complaint], change(complaint.id, ComplaintStatus.IN_PROGRESS, T0))
        assert updated.due_date is None

    def test_marks_complaint_read(self):
        complaint = make_complaint()
        [updated] = apply_command([complaint], change(complaint.id, ComplaintStatus.IN_PROGRESS, T0))
        assert updated.is_read_by_admin is True

    def test_only_target_replaced(self):
        target = make_complaint()
        other = make_complaint(description='Other')

        result = apply_command([target, other], change(target.id, ComplaintStatus.IN_PROGRESS, T0))

        assert result[1] is other


class TestUnknownTarget:
    @pytest.mark.parametrize('command', [
        change('C-missing', ComplaintStatus.RESOLVED, T0),
        EditNotes(complaint_id='C-missing', notes='x'),
        MarkRead('C-missing'),
    ])
    def test_unknown_id_is_noop(self, command):
        """Commands for an unknown id return the very same list"""
        collection = [make_complaint()]
        assert apply_command(collection, command) is collection


class TestNotesAndRead:
    def test_edit_notes_leaves_history_alone(self):
        complaint = make_complaint()

        [updated] = apply_command([complaint], EditNotes(complaint_id=complaint.id, notes='Called student'))

        assert updated.admin_notes == 'Called student'
        assert updated.history == complaint.history
        assert updated.status == complaint.status

    def test_mark_read_is_idempotent(self):
        complaint = make_complaint()
        [once] = apply_command([complaint], MarkRead(complaint.id))
        [twice] = apply_command([once], MarkRead(complaint.id))

        assert once.is_read_by_admin is True
        assert twice is once
        assert once.history == complaint.history


def test_replace_all_copies_list():
    replacement = [make_complaint()]
    result = apply_command([], ReplaceAll(replacement))
    assert result == replacement
    assert result is not replacement


def test_unknown_command_type_rejected():
    with pytest.raises(TypeError):
        apply_command([], object())


def test_history_note_wording():
    assert history_note(ComplaintStatus.IN_PROGRESS, ComplaintStatus.RESOLVED) == (
        'Status changed from In Progress to Resolved.'
    )
