"""
Tests for application wiring
"""
from complaint_desk.core.context import build_context
from complaint_desk.core.database import IN_MEMORY_URL
from complaint_desk.utils.complaint_assistant import StubDescriptionAssistant
from complaint_desk.utils.live_voice import NullVoiceAssistant

from tests.conftest import FIXED_NOW


def test_offline_collaborators_when_ai_disabled():
    context = build_context(database_url=IN_MEMORY_URL)
    try:
        assert isinstance(context.description_assistant, StubDescriptionAssistant)
        assert isinstance(context.voice_assistant, NullVoiceAssistant)
    finally:
        context.dispose()


def test_stores_share_storage_and_channel(context):
    assert context.session.storage is context.complaints.storage
    assert context.session.notifications is context.notifications
    assert context.complaints.notifications is context.notifications


def test_today_follows_clock_and_timezone(clock, timers):
    clock.now = FIXED_NOW.replace(hour=23, minute=30)
    context = build_context(
        database_url=IN_MEMORY_URL, clock=clock, timezone='Africa/Lagos', timer_factory=timers
    )
    try:
        assert context.today().isoformat() == '2024-06-06'
    finally:
        context.dispose()


def test_separate_contexts_do_not_share_state(context, clock, timers):
    other = build_context(database_url=IN_MEMORY_URL, clock=clock, timer_factory=timers)
    try:
        context.complaints.update_notes(context.complaints.complaints[0].id, 'only here')
        assert other.complaints.complaints[0].admin_notes != 'only here'
    finally:
        other.dispose()
