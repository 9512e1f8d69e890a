"""Canned legal guidance used when the completion endpoint is unavailable"""

from typing import NamedTuple, Optional

from trade_legal_chat.models.chat import AIResponse
from trade_legal_chat.utils.language import Language, detect_language

FALLBACK_CONFIDENCE = 0.7


class FallbackRule(NamedTuple):
    """Keywords that select a branch, and the branch's answer per language"""
    keywords: tuple[str, ...]
    english: str
    persian: str
    suggestions: list[str]
    related_topics: list[str]


# First match wins; order matters
FALLBACK_RULES: list[FallbackRule] = [
    FallbackRule(
        keywords=('export', 'china', 'صادرات', 'چین'),
        english=(
            "For China exports, you'll need a Commercial Invoice, Packing List, Certificate "
            "of Origin (if applicable), and Export License for restricted items. The process "
            "typically takes 3-5 business days for documentation review."
        ),
        persian=(
            "برای صادرات از چین به فاکتور تجاری، لیست بسته‌بندی، گواهی مبدأ (در صورت نیاز) "
            "و مجوز صادرات برای کالاهای محدودشده نیاز دارید. بررسی مدارک معمولاً ۳ تا ۵ روز "
            "کاری طول می‌کشد."
        ),
        suggestions=[
            'Export Documentation Checklist',
            'China Export Regulations',
            'Certificate of Origin Requirements',
        ],
        related_topics=['Export Procedures', 'Documentation', 'China Trade'],
    ),
    FallbackRule(
        keywords=('import', 'canada', 'واردات', 'کانادا'),
        english=(
            "Canada imports require a Bill of Lading, Commercial Invoice in English/French, "
            "Packing List, and Import Declaration (B3 Form). Customs clearance usually takes "
            "1-3 business days."
        ),
        persian=(
            "واردات به کانادا به بارنامه، فاکتور تجاری به زبان انگلیسی یا فرانسوی، لیست "
            "بسته‌بندی و اظهارنامه واردات (فرم B3) نیاز دارد. ترخیص گمرکی معمولاً ۱ تا ۳ روز "
            "کاری طول می‌کشد."
        ),
        suggestions=['Import Documentation', 'Canada Customs Procedures', 'B3 Form Requirements'],
        related_topics=['Import Procedures', 'Customs Clearance', 'Canada Trade'],
    ),
    FallbackRule(
        keywords=('customs', 'documentation', 'گمرک', 'مدارک'),
        english=(
            "Essential customs documents include: Commercial Invoice, Packing List, Bill of "
            "Lading, Certificate of Origin, and Customs Declaration. Always ensure documents "
            "are complete and accurate to avoid delays."
        ),
        persian=(
            "مدارک اصلی گمرکی شامل فاکتور تجاری، لیست بسته‌بندی، بارنامه، گواهی مبدأ و "
            "اظهارنامه گمرکی است. برای جلوگیری از تأخیر، از کامل و دقیق بودن مدارک مطمئن شوید."
        ),
        suggestions=['Documentation Checklist', 'Customs Requirements', 'Common Mistakes to Avoid'],
        related_topics=['Documentation', 'Customs', 'Compliance'],
    ),
    FallbackRule(
        keywords=('tariff', 'duty', 'تعرفه', 'عوارض'),
        english=(
            "Tariffs and duties vary by product classification (HS code), country of origin, "
            "and trade agreements. Use the Canada Border Services Agency (CBSA) tariff "
            "calculator for accurate rates. Preferential rates may apply under trade agreements."
        ),
        persian=(
            "تعرفه‌ها و عوارض بر اساس طبقه‌بندی کالا (کد HS)، کشور مبدأ و موافقت‌نامه‌های "
            "تجاری متفاوت است. برای نرخ دقیق از ماشین‌حساب تعرفه آژانس خدمات مرزی کانادا "
            "(CBSA) استفاده کنید. ممکن است طبق موافقت‌نامه‌های تجاری نرخ ترجیحی اعمال شود."
        ),
        suggestions=['HS Code Lookup', 'Tariff Calculator', 'Trade Agreement Benefits'],
        related_topics=['Tariffs', 'Duties', 'HS Codes', 'Trade Agreements'],
    ),
    FallbackRule(
        keywords=('hs code', 'classification', 'کد hs', 'طبقه‌بندی'),
        english=(
            "HS codes are 6-10 digit codes that classify products for customs purposes. "
            "Accurate classification is crucial for determining tariffs, restrictions, and "
            "requirements. Use the CBSA classification tool or consult with a customs broker."
        ),
        persian=(
            "کدهای HS کدهای ۶ تا ۱۰ رقمی برای طبقه‌بندی گمرکی کالا هستند. طبقه‌بندی دقیق برای "
            "تعیین تعرفه‌ها، محدودیت‌ها و الزامات ضروری است. از ابزار طبقه‌بندی CBSA استفاده "
            "کنید یا با یک کارگزار گمرکی مشورت کنید."
        ),
        suggestions=['HS Code Classification Tool', 'CBSA Resources', 'Customs Broker Consultation'],
        related_topics=['HS Codes', 'Product Classification', 'Customs'],
    ),
    FallbackRule(
        keywords=('restricted', 'prohibited', 'محدود', 'ممنوع'),
        english=(
            "Many products have import/export restrictions or require special permits. Check "
            "the CBSA prohibited and restricted goods list, and consult with relevant "
            "regulatory agencies (Health Canada, CFIA, etc.) for specific requirements."
        ),
        persian=(
            "بسیاری از کالاها محدودیت واردات یا صادرات دارند یا به مجوز ویژه نیاز دارند. فهرست "
            "کالاهای ممنوع و محدود CBSA را بررسی کنید و برای الزامات دقیق با نهادهای نظارتی "
            "مربوط (مانند Health Canada و CFIA) مشورت کنید."
        ),
        suggestions=['Prohibited Goods List', 'Restricted Items Guide', 'Permit Requirements'],
        related_topics=['Restrictions', 'Permits', 'Regulations'],
    ),
]

GENERAL_RULE = FallbackRule(
    keywords=(),
    english=(
        "I can help you with various aspects of international trade law and customs "
        "compliance. Please ask about specific topics like export/import procedures, "
        "documentation requirements, tariffs, HS codes, or regulatory compliance. For complex "
        "legal matters, I recommend consulting with a qualified trade lawyer."
    ),
    persian=(
        "می‌توانم در زمینه‌های مختلف حقوق تجارت بین‌الملل و انطباق گمرکی به شما کمک کنم. لطفاً "
        "درباره موضوعی مشخص مانند رویه‌های صادرات و واردات، مدارک لازم، تعرفه‌ها، کدهای HS یا "
        "انطباق با مقررات بپرسید. برای مسائل حقوقی پیچیده، مشورت با یک وکیل متخصص تجارت را "
        "توصیه می‌کنم."
    ),
    suggestions=['Export Procedures', 'Import Requirements', 'Legal Consultation'],
    related_topics=['General Trade Law', 'Compliance', 'Legal Advice'],
)

TECHNICAL_DIFFICULTIES = (
    "I apologize, but I'm experiencing technical difficulties. Please try again or contact "
    "our support team for assistance."
)


def select_fallback_rule(message: str) -> FallbackRule:
    """First rule whose keywords appear in the lowercased message"""
    text = message.lower()
    for rule in FALLBACK_RULES:
        if any(keyword in text for keyword in rule.keywords):
            return rule
    return GENERAL_RULE


def get_default_legal_response(message: str, language: Optional[Language] = None) -> AIResponse:
    """
    Keyword-selected canned answer with fixed 0.7 confidence.
    Persian messages get the Persian text; English and any other
    language get the English text.
    """
    if language is None:
        language = detect_language(message)
    rule = select_fallback_rule(message)
    text = rule.persian if language == Language.PERSIAN else rule.english
    return AIResponse(
        response=text,
        suggestions=list(rule.suggestions),
        related_topics=list(rule.related_topics),
        confidence=FALLBACK_CONFIDENCE,
    )


def technical_difficulties_response() -> AIResponse:
    """Displayable answer for turns that could not be processed at all"""
    return AIResponse(response=TECHNICAL_DIFFICULTIES, confidence=0.0)
