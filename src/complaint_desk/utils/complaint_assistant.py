"""Complaint writing assistant.

Turns a student's keywords into a formal complaint description. The real
implementation calls a chat model through LangChain; the stub keeps the rest
of the system usable offline.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any

from langchain_core.output_parsers import StrOutputParser
from langchain_core.prompts import ChatPromptTemplate

from complaint_desk.core.exceptions import AssistantError, ValidationError

logger = logging.getLogger(__name__)

DESCRIPTION_PROMPT = (
    "You are a helpful assistant for a university student. Your task is to write "
    "a formal and detailed complaint for the Computer Science department based on "
    "the student's keywords. The tone should be respectful but firm, clearly "
    "stating the problem and what the student has observed. Expand on the "
    'following points: "{keywords}". Provide only the complaint description text, '
    "without any introductory phrases like 'Here is the description:'."
)

EMPTY_KEYWORDS_MESSAGE = (
    "Please provide some keywords or a short sentence about your complaint."
)
FAILURE_MESSAGE = (
    "Failed to generate description. Please check your connection or try again later."
)


def _require_keywords(keywords: str) -> str:
    keywords = (keywords or "").strip()
    if not keywords:
        raise ValidationError(EMPTY_KEYWORDS_MESSAGE)
    return keywords


class DescriptionAssistant(ABC):
    """Capability interface for generating complaint descriptions."""

    @abstractmethod
    def generate_description(self, keywords: str) -> str:
        """Expand keywords into a complaint description.

        Raises:
            ValidationError: If keywords are empty.
            AssistantError: If the generation fails.
        """
        pass


class LLMDescriptionAssistant(DescriptionAssistant):
    """Generates descriptions with a LangChain chat model."""

    def __init__(self, llm: Any):
        """Initialize the assistant.

        Args:
            llm: LangChain chat model (or any runnable accepting messages).
        """
        self.prompt = ChatPromptTemplate.from_messages([("user", DESCRIPTION_PROMPT)])
        self.chain = self.prompt | llm | StrOutputParser()

    def generate_description(self, keywords: str) -> str:
        keywords = _require_keywords(keywords)
        try:
            text = self.chain.invoke({"keywords": keywords})
        except Exception as e:
            logger.error("Description generation failed: %s", e)
            raise AssistantError(FAILURE_MESSAGE) from e
        text = (text or "").strip()
        if not text:
            raise AssistantError(FAILURE_MESSAGE)
        return text


class StubDescriptionAssistant(DescriptionAssistant):
    """Offline assistant that formats the keywords without a model."""

    def generate_description(self, keywords: str) -> str:
        keywords = _require_keywords(keywords)
        return (
            "I am writing to formally raise a complaint regarding the following "
            f"matter: {keywords}. I would appreciate it if the department could "
            "look into this and advise on the next steps."
        )
