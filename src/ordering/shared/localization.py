"""Language resolution and display strings for carts and orders."""

from ordering.shared.localized_text import LANGUAGES, LocalizedText

DEFAULT_LANGUAGE = "en"

CART_STATUS_TEXT = {
    "active": {"en": "Active", "ar": "نشط"},
    "abandoned": {"en": "Abandoned", "ar": "مهجور"},
    "converted": {"en": "Converted", "ar": "تم التحويل"},
}

ORDER_STATUS_TEXT = {
    "pending": {"en": "Pending", "ar": "قيد الانتظار"},
    "processing": {"en": "Processing", "ar": "قيد المعالجة"},
    "shipped": {"en": "Shipped", "ar": "تم الشحن"},
    "delivered": {"en": "Delivered", "ar": "تم التسليم"},
    "cancelled": {"en": "Cancelled", "ar": "ملغي"},
}

PAYMENT_METHOD_TEXT = {
    "cash": {"en": "Cash", "ar": "نقدي"},
    "credit_card": {"en": "Credit Card", "ar": "بطاقة ائتمان"},
    "bank_transfer": {"en": "Bank Transfer", "ar": "تحويل بنكي"},
}

PAYMENT_STATUS_TEXT = {
    "pending": {"en": "Pending", "ar": "قيد الانتظار"},
    "paid": {"en": "Paid", "ar": "مدفوع"},
    "failed": {"en": "Failed", "ar": "فشل"},
    "refunded": {"en": "Refunded", "ar": "مسترد"},
}


def resolve_language(query_lang: str | None = None, accept_language: str | None = None) -> str:
    """Pick the response language.

    An explicit ``?lang=`` wins when it names a supported language. Otherwise
    an ``Accept-Language`` header starting with ``ar`` selects Arabic. English
    is the default.
    """
    if query_lang:
        lang = query_lang.strip().lower()[:2]
        if lang in LANGUAGES:
            return lang

    if accept_language and accept_language.strip().lower().startswith("ar"):
        return "ar"

    return DEFAULT_LANGUAGE


def pick(text, lang: str) -> str | None:
    """Return ``text`` in ``lang``, falling back to the other language.

    ``text`` may be a ``LocalizedText``, a dict, or ``None``.
    """
    if text is None:
        return None
    if isinstance(text, LocalizedText):
        text = text.as_payload()

    preferred = text.get(lang)
    if preferred:
        return preferred

    for fallback in (DEFAULT_LANGUAGE, *LANGUAGES):
        if text.get(fallback):
            return text[fallback]
    return None


def display(mapping: dict, value: str | None, lang: str) -> str | None:
    """Look up a display string for an enum value, echoing unknown values."""
    if value is None:
        return None
    labels = mapping.get(value)
    if labels is None:
        return value
    return labels.get(lang) or labels[DEFAULT_LANGUAGE]


def discount_text(discount: float, description, lang: str) -> str:
    """Human-readable discount summary, e.g. ``10% discount applied: Eid sale``."""
    if not discount:
        return "لم يتم تطبيق أي خصم" if lang == "ar" else "No discount applied"

    amount = f"{discount:g}"
    described = pick(description, lang)
    if lang == "ar":
        text = f"تم تطبيق خصم {amount}%"
    else:
        text = f"{amount}% discount applied"
    return f"{text}: {described}" if described else text
