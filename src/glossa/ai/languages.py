"""Languages the AI generator knows by display name."""

from __future__ import annotations

from pydantic import BaseModel


class KnownLanguage(BaseModel):
    code: str
    name: str
    rtl: bool = False


KNOWN_LANGUAGES: dict[str, KnownLanguage] = {
    lang.code: lang
    for lang in (
        KnownLanguage(code="en", name="English"),
        KnownLanguage(code="he", name="Hebrew", rtl=True),
        KnownLanguage(code="ru", name="Russian"),
        KnownLanguage(code="es", name="Spanish"),
        KnownLanguage(code="fr", name="French"),
        KnownLanguage(code="de", name="German"),
        KnownLanguage(code="ar", name="Arabic", rtl=True),
    )
}

# Extra prompt guidance for scripts and grammars that need it.
LANGUAGE_NOTES: dict[str, list[str]] = {
    "he": [
        "Use modern Hebrew appropriate for software interfaces",
        "Ensure proper Hebrew grammar and spelling",
    ],
    "ru": [
        "Use standard Russian appropriate for software interfaces",
        "Ensure proper Russian grammar and spelling",
    ],
    "ar": [
        "Use Modern Standard Arabic appropriate for software interfaces",
    ],
}


def language_name(code: str) -> str:
    known = KNOWN_LANGUAGES.get(code)
    return known.name if known else code
