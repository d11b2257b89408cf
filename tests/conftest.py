"""
Complaint Desk - Test Configuration and Fixtures
"""
import os
from datetime import datetime
from typing import AsyncGenerator, Callable, Generator, List

import pytest
import pytz
from httpx import ASGITransport, AsyncClient

os.environ['AI_FEATURES_ENABLED'] = 'false'

from complaint_desk.app import create_app
from complaint_desk.core.context import AppContext, build_context
from complaint_desk.core.database import (
    IN_MEMORY_URL,
    create_session_factory,
    create_storage_engine,
)
from complaint_desk.utils.complaint_assistant import StubDescriptionAssistant
from complaint_desk.utils.live_voice import NullVoiceAssistant
from complaint_desk.utils.storage import LocalStorage

# The seeded complaint due 2024-06-05 is due today; nothing is overdue yet
FIXED_NOW = datetime(2024, 6, 5, 12, 0, tzinfo=pytz.utc)

STUDENT_ID = 'U2021/5570009'
STUDENT_NAME = 'Ada Okoro'


class ManualTimer:
    """Auto-hide timer that only fires when a test says so"""

    def __init__(self, interval: float, callback: Callable[[], None]):
        self.interval = interval
        self.callback = callback
        self.started = False
        self.cancelled = False

    def start(self) -> None:
        self.started = True

    def cancel(self) -> None:
        self.cancelled = True

    def fire(self) -> None:
        self.callback()


class ManualTimerFactory:
    def __init__(self):
        self.timers: List[ManualTimer] = []

    def __call__(self, interval: float, callback: Callable[[], None]) -> ManualTimer:
        timer = ManualTimer(interval, callback)
        self.timers.append(timer)
        return timer

    @property
    def last(self) -> ManualTimer:
        return self.timers[-1]


class Clock:
    """Settable clock"""

    def __init__(self, now: datetime = FIXED_NOW):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def clock() -> Clock:
    return Clock()


@pytest.fixture
def timers() -> ManualTimerFactory:
    return ManualTimerFactory()


@pytest.fixture
def storage() -> Generator[LocalStorage, None, None]:
    """Fresh in-memory local storage"""
    engine = create_storage_engine(IN_MEMORY_URL)
    yield LocalStorage(create_session_factory(engine))
    engine.dispose()


@pytest.fixture
def context(clock: Clock, timers: ManualTimerFactory) -> Generator[AppContext, None, None]:
    """Application context over an in-memory database with offline assistants"""
    ctx = build_context(
        database_url=IN_MEMORY_URL,
        clock=clock,
        timer_factory=timers,
        description_assistant=StubDescriptionAssistant(),
        voice_assistant=NullVoiceAssistant(),
    )
    yield ctx
    ctx.dispose()


@pytest.fixture
async def client(context: AppContext) -> AsyncGenerator[AsyncClient, None]:
    """Test client bound to the test context"""
    app = create_app(context)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url='http://test') as ac:
        yield ac


@pytest.fixture
async def student_client(client: AsyncClient) -> AsyncClient:
    response = await client.post('/api/auth/student-login', json={'student_id': STUDENT_ID})
    assert response.status_code == 200
    return client


@pytest.fixture
async def admin_client(client: AsyncClient) -> AsyncClient:
    response = await client.post(
        '/api/auth/admin-login',
        json={'username': 'admin', 'password': 'password'},
    )
    assert response.status_code == 200
    return client
