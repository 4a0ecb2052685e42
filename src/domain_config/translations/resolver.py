"""Translation lookup with a single fallback to the default language."""

from dataclasses import dataclass
from typing import Protocol

from domain_config.core.exceptions import ResourceNotFoundError
from domain_config.core.logging import get_logger
from domain_config.i18n.config import LanguageConfig
from domain_config.translations.models import Translation

logger = get_logger(__name__)


class TranslationSource(Protocol):
    async def get_translation(
        self, config_id: int, language_code: str
    ) -> Translation | None: ...


@dataclass(frozen=True)
class ResolvedTranslation:
    translation: Translation
    actual_language: str


class TranslationResolver:
    """Fetch the translation for a config in the preferred language.

    Lookup order: preferred language, then the default language (skipped
    when they are equal). At most two store reads per call.
    """

    def __init__(self, store: TranslationSource, language_config: LanguageConfig):
        self.store = store
        self.language_config = language_config

    async def resolve(self, config_id: int, preferred: str) -> ResolvedTranslation:
        """Return the translation and the language actually used.

        Raises:
            ResourceNotFoundError: If neither the preferred nor the default
                language has a translation.
        """
        translation = await self.store.get_translation(config_id, preferred)
        if translation is not None:
            return ResolvedTranslation(translation, preferred)

        default = self.language_config.default_language
        if preferred != default:
            translation = await self.store.get_translation(config_id, default)
            if translation is not None:
                logger.info(
                    "language_fallback",
                    config_id=config_id,
                    requested=preferred,
                    served=default,
                )
                return ResolvedTranslation(translation, default)

        raise ResourceNotFoundError(
            "Translation",
            config_id,
            details={"requested": preferred, "default": default},
        )
