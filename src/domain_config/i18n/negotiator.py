"""Language negotiation from an explicit override and Accept-Language.

Priority:
1. Explicit override (the `lang` query parameter), if supported
2. Accept-Language header, ranked by quality value
3. The configured default language
"""

from typing import NamedTuple

from domain_config.core.exceptions import ValidationError
from domain_config.core.logging import get_logger
from domain_config.i18n.config import (
    LanguageConfig,
    is_well_formed,
    normalize_language_code,
)

logger = get_logger(__name__)


class LanguagePreference(NamedTuple):
    """One entry of a ranked preference list."""

    code: str
    quality: float


def _parse_quality(params: list[str]) -> float | None:
    """Extract q from the parameters of one header entry.

    Returns None when q is present but unusable (non-numeric, outside
    (0, 1], or NaN); the caller drops such entries.
    """
    for param in params:
        name, sep, value = param.strip().partition("=")
        if not sep or name.strip().lower() != "q":
            continue
        try:
            quality = float(value.strip())
        except ValueError:
            return None
        if not 0.0 < quality <= 1.0:
            return None
        return quality
    return 1.0


def parse_accept_language(header: str | None) -> list[LanguagePreference]:
    """Parse an Accept-Language header into a ranked preference list.

    Handles formats like:
    - "en-US,en;q=0.9,zh-CN;q=0.8"
    - "zh_CN"
    - "fr-FR;q=0.9, zh-CN;q=0.8, en-US;q=0.7"

    Tags are normalized. Entries with an unusable q, wildcards, malformed
    tags and repeated tags (after the first) are dropped. The result is
    sorted by quality, highest first; ties keep header order.

    Args:
        header: The Accept-Language header value

    Returns:
        Ranked preferences, possibly empty.
    """
    if not header:
        return []

    preferences: list[LanguagePreference] = []
    seen: set[str] = set()

    for raw_part in header.split(","):
        part = raw_part.strip()
        if not part:
            continue

        tag, *params = part.split(";")
        code = normalize_language_code(tag)
        if code == "*" or not is_well_formed(code) or code in seen:
            continue

        quality = _parse_quality(params)
        if quality is None:
            continue

        seen.add(code)
        preferences.append(LanguagePreference(code, quality))

    # list.sort is stable, so equal weights keep their header order
    preferences.sort(key=lambda p: p.quality, reverse=True)
    return preferences


class LanguageNegotiator:
    """Select one supported language code per request.

    The result is always a member of the configured supported set.
    """

    def __init__(self, config: LanguageConfig):
        self.config = config

    @property
    def default_language(self) -> str:
        return self.config.default_language

    def normalize_override(self, explicit: str | None) -> str | None:
        """Normalize an explicit override.

        Raises:
            ValidationError: If the override is present but not a
                well-formed language tag.
        """
        if explicit is None or not explicit.strip():
            return None
        code = normalize_language_code(explicit)
        if not is_well_formed(code):
            raise ValidationError(
                f"Malformed language code: {explicit!r}",
                field="lang",
                supported=sorted(self.config.supported_languages),
            )
        return code

    def negotiate(
        self, explicit: str | None = None, accept_language: str | None = None
    ) -> str:
        """Return the best supported language for this request.

        Args:
            explicit: Override from the query string; outranks the header
                when supported, falls through to the header otherwise
            accept_language: Raw Accept-Language header value

        Raises:
            ValidationError: If explicit is malformed.
        """
        override = self.normalize_override(explicit)
        if override is not None:
            if override in self.config.supported_languages:
                return override
            logger.debug("language_override_unsupported", requested=override)

        for preference in parse_accept_language(accept_language):
            if preference.code in self.config.supported_languages:
                return preference.code

        return self.config.default_language
