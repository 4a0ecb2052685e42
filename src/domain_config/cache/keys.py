"""Cache key formats.

Entries written by earlier deployments must stay addressable, so these
formats never change.
"""

DOMAIN_KEY_PREFIX = "domain:config:"
CONFIG_KEY_PREFIX = "config:"


def domain_cache_key(domain_name: str) -> str:
    return f"{DOMAIN_KEY_PREFIX}{domain_name}"


def config_language_cache_key(config_id: int, language_code: str) -> str:
    return f"{CONFIG_KEY_PREFIX}{config_id}:lang:{language_code}"
