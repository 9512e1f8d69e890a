"""Prompt assembly for the legal assistant"""

from typing import Optional, Sequence

from trade_legal_chat.models.ai_config import AIConfiguration
from trade_legal_chat.models.chat import ChatMessage, ContextFact, MessageType
from trade_legal_chat.utils.language import Language, language_directive


# System prompt for the trade-compliance legal assistant
SYSTEM_PROMPT = """You are a specialized legal AI assistant focused on international trade law, customs compliance, and China-Canada trade regulations.

LEGAL EXPERTISE AREAS:
- International trade law and regulations
- Canadian customs and import requirements
- Chinese export regulations and procedures
- Trade agreements and preferential tariffs
- Legal compliance and documentation requirements
- Dispute resolution and legal procedures
- Contract law and commercial agreements

IMPORTANT LEGAL DISCLAIMERS:
- Provide general legal information and guidance only
- Always recommend consulting qualified legal professionals for specific legal matters
- Do not provide specific legal advice that could be relied upon in court
- Emphasize the importance of professional legal consultation for complex matters

RESPONSE GUIDELINES:
- Be accurate and up-to-date with current regulations
- Provide practical, actionable guidance
- Include relevant legal references when possible
- Suggest next steps and professional resources
- Maintain a professional and helpful tone
- Use conversation context to provide more relevant and personalized responses"""


USER_PROMPT_TEMPLATE = """Legal Question: {message}

Please provide a comprehensive legal response that includes:
1. Direct answer to the legal question
2. Relevant legal framework and regulations
3. Practical steps and recommendations
4. When to consult a qualified legal professional
5. Any relevant legal disclaimers

Format your response as clear, actionable legal guidance.

{directive}"""


def build_context_prompt(
    facts: Sequence[ContextFact],
    history: Sequence[ChatMessage],
    language: Language,
) -> str:
    """
    Build the conversation context block.

    Args:
        facts: Saved context facts, most important first
        history: Recent message rows as retrieved, newest first
        language: Detected language of the incoming message

    Returns:
        History (oldest first), saved facts and the language directive
    """
    parts = []

    if history:
        lines = ["CONVERSATION HISTORY:"]
        for msg in reversed(history):
            if msg.message_type == MessageType.USER:
                lines.append(f"User: {msg.message}")
            else:
                lines.append(f"AI: {msg.response}")
        parts.append("\n".join(lines))

    if facts:
        lines = ["SAVED CONTEXT:"]
        for fact in facts:
            lines.append(f"{fact.context_key}: {fact.context_value}")
        parts.append("\n".join(lines))

    parts.append(language_directive(language))
    return "\n\n".join(parts)


def build_system_prompt(context: str, config: Optional[AIConfiguration] = None) -> str:
    """System instruction with optional admin overrides and the conversation context"""
    sections = []
    if config and config.system_role:
        sections.append(config.system_role.strip())
    sections.append(SYSTEM_PROMPT)
    if config and config.custom_instructions:
        sections.append(f"ADDITIONAL INSTRUCTIONS: {config.custom_instructions.strip()}")
    sections.append(f"CONVERSATION CONTEXT:\n{context}")
    return "\n\n".join(sections)


def build_user_prompt(message: str, language: Language) -> str:
    """User turn asking for the five-part answer structure"""
    return USER_PROMPT_TEMPLATE.format(
        message=message, directive=language_directive(language)
    )
