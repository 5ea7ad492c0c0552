"""User-selected profile modes and language tags."""

from enum import StrEnum


class ProfileMode(StrEnum):
    """Nutritional guidance persona chosen by the user."""

    CHILDREN = "children"
    PREGNANT = "pregnant"
    ELDERLY = "elderly"
    WEIGHT_LOSS = "weight-loss"
    ANEMIA = "anemia"

    @classmethod
    def parse(cls, raw: str | None) -> "ProfileMode | None":
        """Return the matching profile, or None for unknown values."""
        if not raw:
            return None
        try:
            return cls(raw.strip().lower())
        except ValueError:
            return None


class LanguageTag(StrEnum):
    """Languages supported for spoken feedback."""

    EN = "en"
    HI = "hi"
    TA = "ta"
    BN = "bn"
    GU = "gu"
    TE = "te"

    @classmethod
    def parse(cls, raw: str | None) -> "LanguageTag":
        """Return the matching language, falling back to English."""
        if not raw:
            return cls.EN
        try:
            return cls(raw.strip().lower())
        except ValueError:
            return cls.EN

    @property
    def display_name(self) -> str:
        """English name of the language, used in translation prompts."""
        return _LANGUAGE_NAMES[self]


_LANGUAGE_NAMES = {
    LanguageTag.EN: "English",
    LanguageTag.HI: "Hindi",
    LanguageTag.TA: "Tamil",
    LanguageTag.BN: "Bengali",
    LanguageTag.GU: "Gujarati",
    LanguageTag.TE: "Telugu",
}
