"""Multilingual content negotiation.

Turns a `lang` override and an Accept-Language header into exactly one
supported language code, with the configured default as the last resort.
"""

from domain_config.i18n.config import (
    LanguageConfig,
    is_well_formed,
    normalize_language_code,
)
from domain_config.i18n.negotiator import (
    LanguageNegotiator,
    LanguagePreference,
    parse_accept_language,
)

__all__ = [
    "LanguageConfig",
    "LanguageNegotiator",
    "LanguagePreference",
    "is_well_formed",
    "normalize_language_code",
    "parse_accept_language",
]
