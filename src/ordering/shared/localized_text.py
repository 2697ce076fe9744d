"""LocalizedText value object: a string carried in English and/or Arabic."""

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import String

from ordering.domain import ordering

LANGUAGES = ("en", "ar")


@ordering.value_object
class LocalizedText:
    """Bilingual text. At least one language must carry a non-blank value."""

    en: String(max_length=2000)
    ar: String(max_length=2000)

    @invariant.post
    def at_least_one_language(self):
        if not any((getattr(self, lang) or "").strip() for lang in LANGUAGES):
            raise ValidationError({"text": ["At least one language (en or ar) is required"]})

    def in_language(self, lang: str) -> str | None:
        return getattr(self, lang, None) if lang in LANGUAGES else None

    def as_payload(self) -> dict:
        return {lang: getattr(self, lang) for lang in LANGUAGES if getattr(self, lang)}


def localized_text(value, field: str, required: bool = False) -> LocalizedText | None:
    """Validate and normalise a bilingual payload into a ``LocalizedText``.

    ``value`` may be ``None``, a ``LocalizedText``, or a mapping with ``en``
    and/or ``ar`` keys. Values are stripped; blank languages are dropped.
    Raises ``ValidationError`` keyed by ``field`` when the payload is malformed,
    when every language is blank, or when ``required`` and nothing was given.
    """
    if value is None:
        if required:
            raise ValidationError({field: [f"{field} is required"]})
        return None

    if isinstance(value, LocalizedText):
        value = value.as_payload()

    if not isinstance(value, dict):
        raise ValidationError({field: [f"{field} must be an object with 'en' and/or 'ar' keys"]})

    unknown = set(value) - set(LANGUAGES)
    if unknown:
        raise ValidationError({field: [f"Unsupported language(s): {', '.join(sorted(unknown))}"]})

    cleaned = {}
    for lang in LANGUAGES:
        text = value.get(lang)
        if text is None:
            continue
        if not isinstance(text, str):
            raise ValidationError({field: [f"{field}.{lang} must be a string"]})
        if text.strip():
            cleaned[lang] = text.strip()

    if not cleaned:
        raise ValidationError({field: [f"{field} must have at least one language (en or ar)"]})

    return LocalizedText(**cleaned)
