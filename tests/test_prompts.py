"""Tests for language detection and prompt assembly"""

from datetime import datetime, timezone

from trade_legal_chat.models import AIConfiguration, ChatMessage, ContextFact, MessageType
from trade_legal_chat.services.prompts import (
    SYSTEM_PROMPT,
    build_context_prompt,
    build_system_prompt,
    build_user_prompt,
)
from trade_legal_chat.utils.language import (
    LANGUAGE_DIRECTIVES,
    Language,
    detect_language,
)


def _row(kind: MessageType, text: str) -> ChatMessage:
    return ChatMessage(
        session_id="s1",
        user_id="u1",
        message=text if kind == MessageType.USER else "",
        response=text if kind == MessageType.ASSISTANT else "",
        message_type=kind,
        timestamp=datetime.now(timezone.utc),
    )


class TestDetectLanguage:

    def test_english(self):
        assert detect_language("How long does customs clearance take?") == Language.ENGLISH

    def test_persian(self):
        assert detect_language("ترخیص گمرکی چقدر طول می‌کشد؟") == Language.PERSIAN

    def test_mixed_script_is_persian(self):
        assert detect_language("HS code برای دوچرخه") == Language.PERSIAN

    def test_other(self):
        assert detect_language("Combien de temps pour le dédouanement ?") == Language.OTHER


class TestContextPrompt:

    def test_history_rendered_oldest_first(self):
        newest_first = [
            _row(MessageType.ASSISTANT, "second answer"),
            _row(MessageType.USER, "second question"),
            _row(MessageType.ASSISTANT, "first answer"),
            _row(MessageType.USER, "first question"),
        ]
        prompt = build_context_prompt([], newest_first, Language.ENGLISH)

        assert prompt.startswith("CONVERSATION HISTORY:\n")
        lines = prompt.split("\n\n")[0].splitlines()[1:]
        assert lines == [
            "User: first question",
            "AI: first answer",
            "User: second question",
            "AI: second answer",
        ]

    def test_saved_facts(self):
        facts = [
            ContextFact(session_id="s1", user_id="u1", context_key="case_information",
                        context_value="goods held at the border", importance=4),
            ContextFact(session_id="s1", user_id="u1", context_key="legal_topics",
                        context_value="tariff, duty", importance=3),
        ]
        prompt = build_context_prompt(facts, [], Language.ENGLISH)
        assert "SAVED CONTEXT:\ncase_information: goods held at the border\nlegal_topics: tariff, duty" in prompt
        assert "CONVERSATION HISTORY" not in prompt

    def test_empty_context_keeps_directive(self):
        prompt = build_context_prompt([], [], Language.PERSIAN)
        assert prompt == LANGUAGE_DIRECTIVES[Language.PERSIAN]


class TestSystemAndUserPrompt:

    def test_default_system_prompt(self):
        prompt = build_system_prompt("CTX")
        assert prompt.startswith(SYSTEM_PROMPT)
        assert prompt.endswith("CONVERSATION CONTEXT:\nCTX")

    def test_admin_config_merged(self):
        config = AIConfiguration(
            name="strict",
            system_role="You are the in-house counsel of ACME.",
            custom_instructions="Always cite the CBSA memorandum.",
        )
        prompt = build_system_prompt("CTX", config)
        assert prompt.startswith("You are the in-house counsel of ACME.")
        assert "ADDITIONAL INSTRUCTIONS: Always cite the CBSA memorandum." in prompt
        assert prompt.index(SYSTEM_PROMPT) < prompt.index("ADDITIONAL INSTRUCTIONS")

    def test_user_prompt_carries_persian_directive(self):
        prompt = build_user_prompt("تعرفه چیست؟", Language.PERSIAN)
        assert prompt.startswith("Legal Question: تعرفه چیست؟")
        assert "Reply entirely in Persian" in prompt

    def test_user_prompt_english(self):
        prompt = build_user_prompt("What is a B3?", Language.ENGLISH)
        assert "Reply entirely in English" in prompt
