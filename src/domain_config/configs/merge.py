"""Overlay a resolved translation onto a base configuration."""

from domain_config.configs.models import Config, LocalizedConfig
from domain_config.core.exceptions import DataIntegrityError
from domain_config.translations.resolver import ResolvedTranslation


def merge_config(
    config: Config, resolved: ResolvedTranslation | None = None
) -> LocalizedConfig:
    """Produce the localized view of a configuration.

    Base fields come from config and are never altered; translated fields
    come from the resolved translation, and `language` reports the language
    actually served. Inputs are not mutated; keywords are copied so the
    result shares no mutable state with the ORM row.

    With no translation (multilingual resolution disabled) the translated
    fields and `language` are None.

    Raises:
        DataIntegrityError: If the translation belongs to another config.
    """
    localized = LocalizedConfig(
        id=config.id,
        links=config.links,
        permissions=config.permissions,
        created_at=config.created_at,
        updated_at=config.updated_at,
    )
    if resolved is None:
        return localized

    translation = resolved.translation
    if translation.config_id != config.id:
        raise DataIntegrityError(
            "Translation does not belong to config",
            config_id=config.id,
            translation_config_id=translation.config_id,
        )

    return localized.model_copy(
        update={
            "title": translation.title,
            "author": translation.author,
            "description": translation.description,
            "keywords": list(translation.keywords or []),
            "language": resolved.actual_language,
        }
    )
