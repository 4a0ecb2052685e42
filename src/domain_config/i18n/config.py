"""Language configuration for multilingual configuration payloads.

The supported set and the default language come from settings; nothing in
the negotiation or resolution logic hard-codes a language.
"""

from dataclasses import dataclass
import re

from domain_config.core.config import Settings, normalize_language_code

# Lowercase BCP 47-like tag after normalization: "en", "zh-cn", "zh-hant-tw"
LANGUAGE_TAG_PATTERN = re.compile(r"^[a-z]{2,3}(-[a-z0-9]{2,8})*$")


def is_well_formed(code: str) -> bool:
    """Check a normalized code against the tag grammar."""
    return bool(LANGUAGE_TAG_PATTERN.fullmatch(code))


@dataclass(frozen=True)
class LanguageConfig:
    """The default language plus the set of languages content is served in."""

    default_language: str
    supported_languages: frozenset[str]

    def __post_init__(self) -> None:
        if self.default_language not in self.supported_languages:
            object.__setattr__(
                self,
                "supported_languages",
                self.supported_languages | {self.default_language},
            )

    @classmethod
    def from_settings(cls, settings: Settings) -> "LanguageConfig":
        return cls(
            default_language=normalize_language_code(settings.DEFAULT_LANGUAGE),
            supported_languages=frozenset(
                normalize_language_code(code) for code in settings.SUPPORTED_LANGUAGES
            ),
        )

    def is_supported(self, code: str) -> bool:
        return normalize_language_code(code) in self.supported_languages

