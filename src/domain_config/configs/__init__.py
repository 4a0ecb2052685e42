from domain_config.configs.crud import (
    count_configs,
    create_config,
    delete_config,
    get_config,
    get_configs,
    update_config,
)
from domain_config.configs.merge import merge_config
from domain_config.configs.models import (
    Config,
    ConfigBase,
    ConfigCreate,
    ConfigPublic,
    ConfigsPublic,
    ConfigUpdate,
    LocalizedConfig,
)

__all__ = [
    # Models
    "Config",
    "ConfigBase",
    "ConfigCreate",
    "ConfigPublic",
    "ConfigUpdate",
    "ConfigsPublic",
    "LocalizedConfig",
    # CRUD
    "count_configs",
    "create_config",
    "delete_config",
    "get_config",
    "get_configs",
    "update_config",
    # Merge
    "merge_config",
]
