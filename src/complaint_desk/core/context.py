"""Application context.

The context is created once by the application root and passed by reference
to every front end. It owns storage, the stores and the AI collaborators.
"""

import logging
from dataclasses import dataclass
from datetime import date
from typing import Optional

from sqlalchemy.engine import Engine

from complaint_desk.config import (
    AI_FEATURES_ENABLED,
    APP_TIMEZONE,
    LIVE_VOICE_API_KEY_ENV,
    NOTIFICATION_TIMEOUT_SECONDS,
    STORAGE_DATABASE_URL,
)
from complaint_desk.core.database import create_session_factory, create_storage_engine
from complaint_desk.core.exceptions import ConfigurationError
from complaint_desk.utils.complaint_assistant import (
    DescriptionAssistant,
    LLMDescriptionAssistant,
    StubDescriptionAssistant,
)
from complaint_desk.utils.complaint_filters import today_in
from complaint_desk.utils.complaint_manager import Clock, ComplaintStore, utc_now
from complaint_desk.utils.live_voice import (
    GeminiVoiceAssistant,
    NullVoiceAssistant,
    VoiceAssistant,
)
from complaint_desk.utils.llm_manager import LLMManager
from complaint_desk.utils.notification_center import NotificationChannel, TimerFactory
from complaint_desk.utils.session_manager import SessionStore
from complaint_desk.utils.storage import LocalStorage

logger = logging.getLogger(__name__)


@dataclass
class AppContext:
    engine: Engine
    storage: LocalStorage
    notifications: NotificationChannel
    session: SessionStore
    complaints: ComplaintStore
    description_assistant: DescriptionAssistant
    voice_assistant: VoiceAssistant
    clock: Clock = utc_now
    timezone: str = APP_TIMEZONE

    def today(self) -> date:
        """Calendar day used for due-date comparisons."""
        return today_in(self.timezone, self.clock())

    def dispose(self) -> None:
        self.notifications.hide()
        self.engine.dispose()


def _default_description_assistant() -> DescriptionAssistant:
    if not AI_FEATURES_ENABLED:
        return StubDescriptionAssistant()
    manager = LLMManager()
    if not manager.has_api_key():
        logger.warning("No LLM API key configured; using offline description assistant")
        return StubDescriptionAssistant()
    try:
        return LLMDescriptionAssistant(manager.get_llm())
    except ConfigurationError as e:
        logger.warning("LLM unavailable (%s); using offline description assistant", e)
        return StubDescriptionAssistant()


def _default_voice_assistant() -> VoiceAssistant:
    if not AI_FEATURES_ENABLED:
        return NullVoiceAssistant()
    try:
        return GeminiVoiceAssistant()
    except ConfigurationError:
        logger.warning("%s not set; live voice support disabled", LIVE_VOICE_API_KEY_ENV)
        return NullVoiceAssistant()


def build_context(
    database_url: str = STORAGE_DATABASE_URL,
    clock: Clock = utc_now,
    timezone: str = APP_TIMEZONE,
    timer_factory: Optional[TimerFactory] = None,
    notification_timeout: float = NOTIFICATION_TIMEOUT_SECONDS,
    description_assistant: Optional[DescriptionAssistant] = None,
    voice_assistant: Optional[VoiceAssistant] = None,
) -> AppContext:
    """Wire up storage, stores and collaborators.

    Args:
        database_url: SQLAlchemy URL of the local storage database.
        clock: Source of "now".
        timezone: Timezone whose calendar decides due dates.
        timer_factory: Auto-hide timer factory for notifications.
        notification_timeout: Seconds before a notification hides itself.
        description_assistant: Overrides the configured text assistant.
        voice_assistant: Overrides the configured voice assistant.

    Returns:
        A ready AppContext with both records loaded.
    """
    engine = create_storage_engine(database_url)
    storage = LocalStorage(create_session_factory(engine))

    if timer_factory is None:
        notifications = NotificationChannel(timeout=notification_timeout)
    else:
        notifications = NotificationChannel(
            timeout=notification_timeout, timer_factory=timer_factory
        )

    context = AppContext(
        engine=engine,
        storage=storage,
        notifications=notifications,
        session=SessionStore(storage, notifications),
        complaints=ComplaintStore(storage, notifications, clock=clock),
        description_assistant=description_assistant or _default_description_assistant(),
        voice_assistant=voice_assistant or _default_voice_assistant(),
        clock=clock,
        timezone=timezone,
    )
    logger.info("Application context ready (%s)", database_url)
    return context
