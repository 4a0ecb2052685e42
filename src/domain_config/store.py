"""Relational store used by the services.

SQLStore composes the per-feature CRUD functions, opening one session per
call. Concurrent calls therefore never share a session, which lets the
list operations run their page and count queries side by side.
"""

from typing import Any, Protocol

from sqlalchemy.exc import IntegrityError

from domain_config.configs import crud as config_crud
from domain_config.configs.models import Config, ConfigCreate
from domain_config.core.db import SessionFactory, store_errors
from domain_config.core.exceptions import ResourceExistsError, ResourceNotFoundError
from domain_config.core.logging import get_logger
from domain_config.domains import crud as domain_crud
from domain_config.domains.models import Domain, DomainCreate
from domain_config.translations import crud as translation_crud
from domain_config.translations.models import Translation

logger = get_logger(__name__)

# SQLSTATE for foreign_key_violation
_FOREIGN_KEY_VIOLATION = "23503"


def _is_foreign_key_violation(error: IntegrityError) -> bool:
    """Tell a dangling reference apart from a unique-name collision."""
    if getattr(error.orig, "sqlstate", None) == _FOREIGN_KEY_VIOLATION:
        return True
    # SQLite reports no SQLSTATE, only the message
    return "FOREIGN KEY constraint failed" in str(error.orig)


def _domain_write_error(
    error: IntegrityError, name: str, config_id: int
) -> ResourceExistsError | ResourceNotFoundError:
    if _is_foreign_key_violation(error):
        return ResourceNotFoundError("Config", config_id)
    return ResourceExistsError("Domain", "domain", name)


class ConfigStore(Protocol):
    """Operations the services need from persistent storage."""

    async def get_domain(self, domain_id: int) -> Domain | None: ...

    async def get_domain_by_name(self, name: str) -> Domain | None: ...

    async def list_domains(self, skip: int, limit: int) -> list[Domain]: ...

    async def count_domains(self) -> int: ...

    async def list_domain_names_by_config(self, config_id: int) -> list[str]: ...

    async def create_domain(self, domain_in: DomainCreate) -> Domain: ...

    async def update_domain(
        self, domain_id: int, changes: dict[str, Any]
    ) -> Domain | None: ...

    async def delete_domain(self, domain_id: int) -> bool: ...

    async def get_config(self, config_id: int) -> Config | None: ...

    async def list_configs(self, skip: int, limit: int) -> list[Config]: ...

    async def count_configs(self) -> int: ...

    async def create_config(self, config_in: ConfigCreate) -> Config: ...

    async def update_config(
        self, config_id: int, changes: dict[str, Any]
    ) -> Config | None: ...

    async def delete_config(self, config_id: int) -> bool: ...

    async def get_translation(
        self, config_id: int, language_code: str
    ) -> Translation | None: ...


class SQLStore:
    """ConfigStore backed by SQLModel async sessions."""

    def __init__(self, session_factory: SessionFactory):
        self._session_factory = session_factory

    # Domains

    async def get_domain(self, domain_id: int) -> Domain | None:
        async with store_errors("get_domain"), self._session_factory() as session:
            return await domain_crud.get_domain(session=session, domain_id=domain_id)

    async def get_domain_by_name(self, name: str) -> Domain | None:
        async with (
            store_errors("get_domain_by_name"),
            self._session_factory() as session,
        ):
            return await domain_crud.get_domain_by_name(session=session, name=name)

    async def list_domains(self, skip: int, limit: int) -> list[Domain]:
        async with store_errors("list_domains"), self._session_factory() as session:
            return await domain_crud.get_domains(
                session=session, skip=skip, limit=limit
            )

    async def count_domains(self) -> int:
        async with store_errors("count_domains"), self._session_factory() as session:
            return await domain_crud.count_domains(session=session)

    async def list_domain_names_by_config(self, config_id: int) -> list[str]:
        async with (
            store_errors("list_domain_names_by_config"),
            self._session_factory() as session,
        ):
            return await domain_crud.get_domain_names_by_config(
                session=session, config_id=config_id
            )

    async def create_domain(self, domain_in: DomainCreate) -> Domain:
        async with store_errors("create_domain"), self._session_factory() as session:
            try:
                return await domain_crud.create_domain(
                    session=session, domain_in=domain_in
                )
            except IntegrityError as e:
                logger.info(
                    "domain_insert_conflict", domain=domain_in.domain, error=str(e)
                )
                raise _domain_write_error(
                    e, domain_in.domain, domain_in.config_id
                ) from e

    async def update_domain(
        self, domain_id: int, changes: dict[str, Any]
    ) -> Domain | None:
        async with store_errors("update_domain"), self._session_factory() as session:
            db_domain = await domain_crud.get_domain(
                session=session, domain_id=domain_id
            )
            if db_domain is None:
                return None
            name = changes.get("domain", db_domain.domain)
            config_id = changes.get("config_id", db_domain.config_id)
            try:
                return await domain_crud.update_domain(
                    session=session, db_domain=db_domain, changes=changes
                )
            except IntegrityError as e:
                logger.info(
                    "domain_update_conflict", domain_id=domain_id, error=str(e)
                )
                raise _domain_write_error(e, name, config_id) from e

    async def delete_domain(self, domain_id: int) -> bool:
        async with store_errors("delete_domain"), self._session_factory() as session:
            db_domain = await domain_crud.get_domain(
                session=session, domain_id=domain_id
            )
            if db_domain is None:
                return False
            await domain_crud.delete_domain(session=session, db_domain=db_domain)
            return True

    # Configs

    async def get_config(self, config_id: int) -> Config | None:
        async with store_errors("get_config"), self._session_factory() as session:
            return await config_crud.get_config(session=session, config_id=config_id)

    async def list_configs(self, skip: int, limit: int) -> list[Config]:
        async with store_errors("list_configs"), self._session_factory() as session:
            return await config_crud.get_configs(
                session=session, skip=skip, limit=limit
            )

    async def count_configs(self) -> int:
        async with store_errors("count_configs"), self._session_factory() as session:
            return await config_crud.count_configs(session=session)

    async def create_config(self, config_in: ConfigCreate) -> Config:
        async with store_errors("create_config"), self._session_factory() as session:
            return await config_crud.create_config(
                session=session, config_in=config_in
            )

    async def update_config(
        self, config_id: int, changes: dict[str, Any]
    ) -> Config | None:
        async with store_errors("update_config"), self._session_factory() as session:
            db_config = await config_crud.get_config(
                session=session, config_id=config_id
            )
            if db_config is None:
                return None
            return await config_crud.update_config(
                session=session, db_config=db_config, changes=changes
            )

    async def delete_config(self, config_id: int) -> bool:
        async with store_errors("delete_config"), self._session_factory() as session:
            db_config = await config_crud.get_config(
                session=session, config_id=config_id
            )
            if db_config is None:
                return False
            await config_crud.delete_config(session=session, db_config=db_config)
            return True

    # Translations

    async def get_translation(
        self, config_id: int, language_code: str
    ) -> Translation | None:
        async with (
            store_errors("get_translation"),
            self._session_factory() as session,
        ):
            return await translation_crud.get_translation(
                session=session, config_id=config_id, language_code=language_code
            )
