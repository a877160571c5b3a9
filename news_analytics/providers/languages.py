"""
Supported translation languages.

Maps ISO 639-1 codes accepted by the API to the FLORES-200 codes expected by
NLLB translation models.
"""

from enum import Enum


class UnsupportedLanguageError(ValueError):
    """Raised when a language code is not in the supported table."""

    def __init__(self, code: str):
        super().__init__(f"Unsupported language: {code}")
        self.code = code


class Language(str, Enum):
    """Languages available for translation."""

    ENGLISH = "en"
    FRENCH = "fr"
    SPANISH = "es"
    GERMAN = "de"
    ITALIAN = "it"
    PORTUGUESE = "pt"
    RUSSIAN = "ru"
    CHINESE = "zh"
    JAPANESE = "ja"
    KOREAN = "ko"
    HINDI = "hi"
    ARABIC = "ar"
    BENGALI = "bn"
    TAMIL = "ta"
    TELUGU = "te"
    MALAYALAM = "ml"

    @property
    def nllb_code(self) -> str:
        """FLORES-200 code used by NLLB models."""
        return NLLB_CODES[self]

    @classmethod
    def from_code(cls, code: "str | Language") -> "Language":
        """
        Resolve an ISO 639-1 code (case-insensitive) to a Language.

        Raises:
            UnsupportedLanguageError: If the code is not supported.
        """
        if isinstance(code, Language):
            return code
        try:
            return cls(str(code).strip().lower())
        except ValueError as e:
            raise UnsupportedLanguageError(str(code)) from e


NLLB_CODES: dict[Language, str] = {
    Language.ENGLISH: "eng_Latn",
    Language.FRENCH: "fra_Latn",
    Language.SPANISH: "spa_Latn",
    Language.GERMAN: "deu_Latn",
    Language.ITALIAN: "ita_Latn",
    Language.PORTUGUESE: "por_Latn",
    Language.RUSSIAN: "rus_Cyrl",
    Language.CHINESE: "zho_Hans",
    Language.JAPANESE: "jpn_Jpan",
    Language.KOREAN: "kor_Hang",
    Language.HINDI: "hin_Deva",
    Language.ARABIC: "ara_Arab",
    Language.BENGALI: "ben_Beng",
    Language.TAMIL: "tam_Taml",
    Language.TELUGU: "tel_Telu",
    Language.MALAYALAM: "mal_Mlym",
}
