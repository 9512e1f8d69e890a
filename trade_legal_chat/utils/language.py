"""Language detection and reply-language directives"""

import re
from enum import Enum


class Language(str, Enum):
    """Dominant script of a user message"""
    ENGLISH = "english"
    PERSIAN = "persian"
    OTHER = "other"


# Arabic, Arabic Supplement, Arabic Presentation Forms-A/B (Persian is written in these)
_PERSIAN_SCRIPT = re.compile(r"[\u0600-\u06FF\u0750-\u077F\uFB50-\uFDFF\uFE70-\uFEFF]")


def detect_language(text: str) -> Language:
    """
    Detect the language of a message from its script.
    Any Arabic/Persian character wins, pure ASCII is English,
    everything else is reported as OTHER.
    """
    if _PERSIAN_SCRIPT.search(text):
        return Language.PERSIAN
    if text.isascii():
        return Language.ENGLISH
    return Language.OTHER


LANGUAGE_DIRECTIVES = {
    Language.PERSIAN: (
        "LANGUAGE: The user wrote in Persian (Farsi). Reply entirely in Persian. "
        "Do not switch to another language unless the user explicitly asks."
    ),
    Language.ENGLISH: (
        "LANGUAGE: The user wrote in English. Reply entirely in English. "
        "Do not switch to another language unless the user explicitly asks."
    ),
    Language.OTHER: (
        "LANGUAGE: Reply in the same language the user wrote in. "
        "Do not switch to another language unless the user explicitly asks."
    ),
}


def language_directive(language: Language) -> str:
    """Instruction telling the model which language to answer in"""
    return LANGUAGE_DIRECTIVES[language]
