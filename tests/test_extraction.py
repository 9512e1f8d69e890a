"""Tests for the keyword heuristics over chat text"""

from trade_legal_chat.services.extraction import (
    DEFAULT_CONTEXT_EXTRACTORS,
    DerivedFact,
    case_information_fact,
    extract_case_information,
    extract_legal_topics,
    extract_related_topics,
    extract_suggestions,
    extract_user_preferences,
    legal_topics_fact,
    user_preferences_fact,
)


class TestSuggestions:

    def test_strips_bullet_markers(self):
        text = "Intro line\n- First step\n* Second step\n• Third step\nOutro"
        assert extract_suggestions(text) == ["First step", "Second step", "Third step"]

    def test_ignores_lines_without_leading_marker(self):
        text = "Use the CBSA tool - it is free\nNothing * here"
        assert extract_suggestions(text) == []

    def test_caps_at_five(self):
        text = "\n".join(f"- item {i}" for i in range(8))
        assert extract_suggestions(text) == [f"item {i}" for i in range(5)]

    def test_skips_empty_bullets(self):
        assert extract_suggestions("-\n- real one\n  *  ") == ["real one"]

    def test_bold_headings_are_not_bullets(self):
        text = "**Direct answer**\n- File a B3 form\n  **Next steps:**\n* Call a broker"
        assert extract_suggestions(text) == ["File a B3 form", "Call a broker"]


class TestRelatedTopics:

    def test_matches_vocabulary_case_insensitively(self):
        text = "See Customs Clearance and TARIFFS; customs clearance again."
        assert extract_related_topics(text) == ["customs clearance", "tariffs"]

    def test_no_topics(self):
        assert extract_related_topics("Hello there") == []


class TestLegalTopics:

    def test_combines_message_and_response(self):
        topics = extract_legal_topics("What tariff applies?", "Ask the CBSA at the border.")
        assert "tariff" in topics
        assert "cbsa" in topics
        assert "border" in topics

    def test_no_duplicates(self):
        topics = extract_legal_topics("export export", "EXPORT")
        assert topics.count("export") == 1


class TestPreferencesAndCaseInfo:

    def test_urgency(self):
        assert extract_user_preferences("I need this ASAP") == ["urgent_response"]

    def test_detail_and_simplicity_both_fire(self):
        prefs = extract_user_preferences("A detailed but simple overview please")
        assert prefs == ["detailed_explanation", "simple_explanation"]

    def test_no_cues(self):
        assert extract_user_preferences("What is a B3 form?") == []

    def test_case_information_truncated(self):
        message = "My case: " + "x" * 300
        info = extract_case_information(message)
        assert info == message[:200]
        assert len(info) == 200

    def test_no_case_information(self):
        assert extract_case_information("What is a B3 form?") is None


class TestContextExtractors:

    def test_legal_topics_fact(self):
        fact = legal_topics_fact("tariff on steel", "duty rates vary")
        assert fact == DerivedFact("legal_topics", "tariff, duty", "legal_topic", 3)

    def test_preferences_fact(self):
        fact = user_preferences_fact("urgent question", "")
        assert fact == DerivedFact("user_preferences", "urgent_response", "preference", 2)

    def test_case_fact_uses_raw_message(self):
        fact = case_information_fact("In my Situation the goods were held", "")
        assert fact.key == "case_information"
        assert fact.value == "In my Situation the goods were held"
        assert fact.type == "case_info"
        assert fact.importance == 4

    def test_extractors_return_none_without_cues(self):
        assert all(extractor("hello", "hi") is None for extractor in DEFAULT_CONTEXT_EXTRACTORS)
