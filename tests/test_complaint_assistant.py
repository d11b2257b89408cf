"""
Unit Tests for the complaint writing assistant
"""
import pytest
from langchain_core.language_models.fake_chat_models import FakeListChatModel
from langchain_core.runnables import RunnableLambda

from complaint_desk.core.exceptions import AssistantError, ConfigurationError, ValidationError
from complaint_desk.utils.complaint_assistant import (
    EMPTY_KEYWORDS_MESSAGE,
    FAILURE_MESSAGE,
    LLMDescriptionAssistant,
    StubDescriptionAssistant,
)
from complaint_desk.utils.llm_manager import LLMManager


class TestLLMDescriptionAssistant:
    def test_returns_model_text(self):
        assistant = LLMDescriptionAssistant(
            FakeListChatModel(responses=['  I wish to report a broken projector.  '])
        )
        assert assistant.generate_description('projector broken') == (
            'I wish to report a broken projector.'
        )

    def test_prompt_embeds_keywords(self):
        prompts = []

        def capture(prompt_value):
            prompts.append(prompt_value.to_string())
            return 'Formal complaint.'

        assistant = LLMDescriptionAssistant(RunnableLambda(capture))
        assistant.generate_description('hostel water outage')

        assert len(prompts) == 1
        assert '"hostel water outage"' in prompts[0]
        assert 'Computer Science department' in prompts[0]

    def test_empty_keywords_rejected_without_calling_model(self):
        calls = []
        assistant = LLMDescriptionAssistant(RunnableLambda(lambda p: calls.append(p) or 'x'))

        with pytest.raises(ValidationError, match=EMPTY_KEYWORDS_MESSAGE):
            assistant.generate_description('   ')
        assert calls == []

    def test_model_failure_becomes_assistant_error(self):
        def explode(prompt_value):
            raise ConnectionError('offline')

        assistant = LLMDescriptionAssistant(RunnableLambda(explode))

        with pytest.raises(AssistantError, match='Failed to generate description'):
            assistant.generate_description('fees')

    def test_blank_model_answer_is_failure(self):
        assistant = LLMDescriptionAssistant(RunnableLambda(lambda p: '   '))
        with pytest.raises(AssistantError) as exc:
            assistant.generate_description('fees')
        assert str(exc.value) == FAILURE_MESSAGE


class TestStubAssistant:
    def test_includes_keywords(self):
        text = StubDescriptionAssistant().generate_description('  late results ')
        assert 'late results' in text

    def test_empty_keywords(self):
        with pytest.raises(ValidationError):
            StubDescriptionAssistant().generate_description('')


class TestLLMManager:
    def test_unknown_provider(self):
        with pytest.raises(ConfigurationError, match='Unsupported provider'):
            LLMManager().get_llm('nope')

    def test_missing_api_key(self, monkeypatch):
        monkeypatch.delenv('DEEPSEEK_API_KEY', raising=False)
        manager = LLMManager(default_provider='deepseek')
        assert manager.has_api_key() is False
        with pytest.raises(ConfigurationError, match='DEEPSEEK_API_KEY'):
            manager.get_llm()

    def test_instances_cached(self, monkeypatch):
        monkeypatch.setenv('OPENAI_API_KEY', 'sk-test')
        manager = LLMManager(default_provider='openai')
        assert manager.get_llm() is manager.get_llm()
        assert manager.get_llm().model_name == 'gpt-4o'
