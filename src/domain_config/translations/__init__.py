from domain_config.translations.crud import get_translation
from domain_config.translations.models import Translation
from domain_config.translations.resolver import (
    ResolvedTranslation,
    TranslationResolver,
    TranslationSource,
)

__all__ = [
    # Models
    "Translation",
    # CRUD
    "get_translation",
    # Resolution
    "ResolvedTranslation",
    "TranslationResolver",
    "TranslationSource",
]
