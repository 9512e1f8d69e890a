"""Keyword heuristics over chat text.

All functions here are pure: text in, strings or facts out. The orchestrator
decides what to persist.
"""

import re
from typing import Callable, NamedTuple, Optional

MAX_SUGGESTIONS = 5
CASE_SUMMARY_LENGTH = 200

_BULLET = re.compile(r'^\s*[•\-*]+\s*')

RELATED_TOPIC_KEYWORDS = [
    'export procedures', 'import requirements', 'customs clearance',
    'documentation', 'tariffs', 'hs codes', 'trade agreements',
    'compliance', 'regulations', 'legal consultation',
]

LEGAL_TOPIC_KEYWORDS = [
    'export', 'import', 'customs', 'tariff', 'duty', 'hs code', 'classification',
    'commercial invoice', 'packing list', 'bill of lading', 'certificate of origin',
    'trade agreement', 'nafta', 'cusma', 'cptpp', 'free trade', 'preferential tariff',
    'restricted goods', 'prohibited items', 'permit', 'license', 'regulation',
    'compliance', 'documentation', 'clearance', 'border', 'cbsa',
    'china', 'canada', 'international trade', 'legal advice', 'consultation',
]

URGENCY_CUES = ('urgent', 'asap', 'quickly')
DETAIL_CUES = ('detailed', 'comprehensive', 'thorough')
SIMPLICITY_CUES = ('simple', 'basic', 'overview')
CASE_CUES = ('case', 'situation', 'scenario')


def _matches(text: str, vocabulary) -> list[str]:
    """Vocabulary entries found in text, in vocabulary order, without duplicates"""
    found = []
    for keyword in vocabulary:
        if keyword in text and keyword not in found:
            found.append(keyword)
    return found


def extract_suggestions(response: str) -> list[str]:
    """Bullet lines (•, -, *) of a response, marker stripped, at most five"""
    suggestions = []
    for line in response.splitlines():
        # "**Heading**" is Markdown bold, not a bullet
        if not _BULLET.match(line) or line.lstrip().startswith('**'):
            continue
        suggestion = _BULLET.sub('', line).strip()
        if suggestion:
            suggestions.append(suggestion)
        if len(suggestions) == MAX_SUGGESTIONS:
            break
    return suggestions


def extract_related_topics(response: str) -> list[str]:
    """Trade-law topic phrases mentioned in a response"""
    return _matches(response.lower(), RELATED_TOPIC_KEYWORDS)


def extract_legal_topics(user_message: str, ai_response: str) -> list[str]:
    """Trade/legal keywords mentioned anywhere in the exchange"""
    return _matches(f"{user_message} {ai_response}".lower(), LEGAL_TOPIC_KEYWORDS)


def extract_user_preferences(message: str) -> list[str]:
    """Urgency and verbosity cues in a user message"""
    text = message.lower()
    preferences = []
    if any(cue in text for cue in URGENCY_CUES):
        preferences.append('urgent_response')
    if any(cue in text for cue in DETAIL_CUES):
        preferences.append('detailed_explanation')
    if any(cue in text for cue in SIMPLICITY_CUES):
        preferences.append('simple_explanation')
    return preferences


def extract_case_information(message: str) -> Optional[str]:
    """First 200 characters of a message that describes a case"""
    text = message.lower()
    if any(cue in text for cue in CASE_CUES):
        return message[:CASE_SUMMARY_LENGTH]
    return None


# Context fact strategies

class DerivedFact(NamedTuple):
    """A context fact before it is bound to a session"""
    key: str
    value: str
    type: str
    importance: int


ContextExtractor = Callable[[str, str], Optional[DerivedFact]]


def legal_topics_fact(user_message: str, ai_response: str) -> Optional[DerivedFact]:
    topics = extract_legal_topics(user_message, ai_response)
    if not topics:
        return None
    return DerivedFact('legal_topics', ', '.join(topics), 'legal_topic', 3)


def user_preferences_fact(user_message: str, ai_response: str) -> Optional[DerivedFact]:
    preferences = extract_user_preferences(user_message)
    if not preferences:
        return None
    return DerivedFact('user_preferences', ', '.join(preferences), 'preference', 2)


def case_information_fact(user_message: str, ai_response: str) -> Optional[DerivedFact]:
    case_info = extract_case_information(user_message)
    if case_info is None:
        return None
    return DerivedFact('case_information', case_info, 'case_info', 4)


DEFAULT_CONTEXT_EXTRACTORS: list[ContextExtractor] = [
    legal_topics_fact,
    user_preferences_fact,
    case_information_fact,
]
