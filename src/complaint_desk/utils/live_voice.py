"""Live voice support assistant.

A voice session streams 16 kHz microphone PCM to a speech model and plays
back the 24 kHz speech it returns, while building a running transcript of
both sides. The session lifecycle is connect -> stream -> close; closing
stops all pending playback and releases the audio device before returning.
"""

import asyncio
import contextlib
import logging
import os
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import AsyncIterator, Dict, List, Optional

from google import genai
from google.genai import types

from complaint_desk.config import (
    INPUT_SAMPLE_RATE,
    LIVE_VOICE_API_KEY_ENV,
    LIVE_VOICE_MODEL,
    OUTPUT_SAMPLE_RATE,
)
from complaint_desk.core.exceptions import AssistantError, ConfigurationError

logger = logging.getLogger(__name__)

CONNECTING_MESSAGE = "Connecting to live support... Please allow microphone access."
CONNECTED_MESSAGE = "Connected! How can I help you today?"
ERROR_MESSAGE = "Sorry, a connection error occurred."


def system_instruction_for(user_name: Optional[str]) -> str:
    return (
        "You are a friendly and helpful AI support agent for the university's "
        "STUDENT'S COMPLAINTS MANAGEMENT SYSTEM. Your goal is to assist students "
        "and administrators. Be concise, empathetic, and professional. Greet the "
        f"user and ask how you can help. The user's name is {user_name}."
    )


@dataclass
class ServerEvent:
    """One message from the speech model, reduced to what the session uses."""
    input_transcription: Optional[str] = None
    output_transcription: Optional[str] = None
    audio: Optional[bytes] = None
    turn_complete: bool = False


@dataclass
class ChatMessage:
    sender: str  # "user" or "model"
    text: str


class AudioDevice(ABC):
    """Microphone and speaker handles owned by a voice session."""

    input_sample_rate: int = INPUT_SAMPLE_RATE
    output_sample_rate: int = OUTPUT_SAMPLE_RATE

    @abstractmethod
    async def read_chunk(self) -> Optional[bytes]:
        """Next block of 16-bit mono PCM at 16 kHz, or None once stopped."""
        pass

    @abstractmethod
    def play(self, pcm: bytes) -> None:
        """Queue 16-bit mono PCM at 24 kHz after any audio already queued."""
        pass

    @abstractmethod
    def stop_playback(self) -> None:
        """Drop everything queued for playback."""
        pass

    @abstractmethod
    def close(self) -> None:
        """Release the microphone and speaker."""
        pass


class VoiceConnection(ABC):
    """An open streaming session with a speech model."""

    @abstractmethod
    async def send_audio(self, pcm: bytes) -> None:
        pass

    @abstractmethod
    def events(self) -> AsyncIterator[ServerEvent]:
        pass

    @abstractmethod
    async def close(self) -> None:
        pass


class VoiceAssistant(ABC):
    """Capability interface for live voice support."""

    @abstractmethod
    async def connect(self, system_instruction: str) -> VoiceConnection:
        """Open a streaming session.

        Raises:
            AssistantError: If the session cannot be opened.
        """
        pass


@dataclass
class TranscriptLog:
    """Accumulates transcription fragments into chat messages.

    Each speaker has at most one open message per turn and fragments extend
    it. A completed turn closes both open messages. Status messages are
    never extended.
    """
    messages: List[ChatMessage] = field(default_factory=list)
    _open: Dict[str, int] = field(default_factory=dict)
    _buffers: Dict[str, str] = field(default_factory=dict)

    def add_system_message(self, text: str) -> None:
        self.messages.append(ChatMessage(sender="model", text=text))

    def _extend(self, sender: str, fragment: str) -> None:
        text = self._buffers.get(sender, "") + fragment
        self._buffers[sender] = text
        index = self._open.get(sender)
        if index is None:
            self._open[sender] = len(self.messages)
            self.messages.append(ChatMessage(sender=sender, text=text))
        else:
            self.messages[index].text = text

    def add_input(self, fragment: str) -> None:
        self._extend("user", fragment)

    def add_output(self, fragment: str) -> None:
        self._extend("model", fragment)

    def complete_turn(self) -> None:
        self._open.clear()
        self._buffers.clear()


class LiveVoiceSession:
    """Runs one voice conversation between the user and an assistant."""

    def __init__(
        self,
        assistant: VoiceAssistant,
        audio: AudioDevice,
        user_name: Optional[str] = None,
    ):
        self.assistant = assistant
        self.audio = audio
        self.user_name = user_name
        self.status = "idle"
        self.transcript = TranscriptLog()
        self._connection: Optional[VoiceConnection] = None
        self._tasks: List[asyncio.Task] = []

    @property
    def messages(self) -> List[ChatMessage]:
        return self.transcript.messages

    async def start(self) -> None:
        """Connect and begin streaming in both directions."""
        if self.status in ("connecting", "connected"):
            return
        self.status = "connecting"
        self.transcript.add_system_message(CONNECTING_MESSAGE)
        try:
            self._connection = await self.assistant.connect(
                system_instruction_for(self.user_name)
            )
        except AssistantError as e:
            logger.error("Live session failed to connect: %s", e)
            await self._fail()
            return

        self.status = "connected"
        self.transcript.messages[-1].text = CONNECTED_MESSAGE
        self._tasks = [
            asyncio.create_task(self._stream_microphone()),
            asyncio.create_task(self._receive()),
        ]
        logger.info("Live session connected")

    async def _stream_microphone(self) -> None:
        while True:
            chunk = await self.audio.read_chunk()
            if chunk is None:
                return
            await self._connection.send_audio(chunk)

    async def _receive(self) -> None:
        try:
            async for event in self._connection.events():
                self.handle_event(event)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.error("Live session error: %s", e)
            self.status = "error"
            self.transcript.add_system_message(ERROR_MESSAGE)

    def handle_event(self, event: ServerEvent) -> None:
        if event.input_transcription:
            self.transcript.add_input(event.input_transcription)
        if event.output_transcription:
            self.transcript.add_output(event.output_transcription)
        if event.audio:
            self.audio.play(event.audio)
        if event.turn_complete:
            self.transcript.complete_turn()

    async def _fail(self) -> None:
        await self.close()
        self.status = "error"
        self.transcript.add_system_message(ERROR_MESSAGE)

    async def close(self) -> None:
        """Stop streaming, stop playback and release the audio device."""
        for task in self._tasks:
            task.cancel()
        for task in self._tasks:
            with contextlib.suppress(asyncio.CancelledError):
                await task
        self._tasks = []

        if self._connection is not None:
            try:
                await self._connection.close()
            except Exception as e:
                logger.error("Error closing live session: %s", e)
            self._connection = None

        self.audio.stop_playback()
        self.audio.close()
        self.transcript.complete_turn()
        self.status = "idle"
        logger.info("Live session closed")


class GeminiVoiceConnection(VoiceConnection):
    def __init__(self, session, exit_stack: contextlib.AsyncExitStack):
        self._session = session
        self._exit_stack = exit_stack

    async def send_audio(self, pcm: bytes) -> None:
        await self._session.send_realtime_input(
            audio=types.Blob(data=pcm, mime_type=f"audio/pcm;rate={INPUT_SAMPLE_RATE}")
        )

    async def events(self) -> AsyncIterator[ServerEvent]:
        # receive() ends after each completed turn
        while True:
            async for message in self._session.receive():
                content = message.server_content
                if content is None:
                    continue
                audio = None
                if content.model_turn and content.model_turn.parts:
                    inline = content.model_turn.parts[0].inline_data
                    audio = inline.data if inline else None
                yield ServerEvent(
                    input_transcription=(
                        content.input_transcription.text
                        if content.input_transcription
                        else None
                    ),
                    output_transcription=(
                        content.output_transcription.text
                        if content.output_transcription
                        else None
                    ),
                    audio=audio,
                    turn_complete=bool(content.turn_complete),
                )

    async def close(self) -> None:
        await self._exit_stack.aclose()


class GeminiVoiceAssistant(VoiceAssistant):
    """Voice assistant backed by the Gemini Live API."""

    def __init__(self, api_key: Optional[str] = None, model: str = LIVE_VOICE_MODEL):
        api_key = api_key or os.getenv(LIVE_VOICE_API_KEY_ENV)
        if not api_key:
            raise ConfigurationError(
                f"{LIVE_VOICE_API_KEY_ENV} must be set to use live voice support"
            )
        self.client = genai.Client(api_key=api_key)
        self.model = model

    async def connect(self, system_instruction: str) -> VoiceConnection:
        config = types.LiveConnectConfig(
            response_modalities=[types.Modality.AUDIO],
            input_audio_transcription=types.AudioTranscriptionConfig(),
            output_audio_transcription=types.AudioTranscriptionConfig(),
            system_instruction=system_instruction,
        )
        exit_stack = contextlib.AsyncExitStack()
        try:
            session = await exit_stack.enter_async_context(
                self.client.aio.live.connect(model=self.model, config=config)
            )
        except Exception as e:
            await exit_stack.aclose()
            raise AssistantError("Could not connect to live support.") from e
        return GeminiVoiceConnection(session, exit_stack)


class _NullConnection(VoiceConnection):
    def __init__(self) -> None:
        self._closed = asyncio.Event()

    async def send_audio(self, pcm: bytes) -> None:
        return None

    async def events(self) -> AsyncIterator[ServerEvent]:
        await self._closed.wait()
        return
        yield  # pragma: no cover

    async def close(self) -> None:
        self._closed.set()


class NullVoiceAssistant(VoiceAssistant):
    """Offline stand-in: accepts audio and never answers."""

    async def connect(self, system_instruction: str) -> VoiceConnection:
        return _NullConnection()
