from domain_config.domains.crud import (
    count_domains,
    create_domain,
    delete_domain,
    get_domain,
    get_domain_by_name,
    get_domain_names_by_config,
    get_domains,
    update_domain,
)
from domain_config.domains.matching import (
    candidate_names,
    extract_host,
    is_valid_host,
    root_domain,
)
from domain_config.domains.models import (
    Domain,
    DomainBase,
    DomainCreate,
    DomainPublic,
    DomainReference,
    DomainsPublic,
    DomainUpdate,
    ResolvedDomain,
)

__all__ = [
    # Models
    "Domain",
    "DomainBase",
    "DomainCreate",
    "DomainPublic",
    "DomainReference",
    "DomainUpdate",
    "DomainsPublic",
    "ResolvedDomain",
    # CRUD
    "count_domains",
    "create_domain",
    "delete_domain",
    "get_domain",
    "get_domain_by_name",
    "get_domain_names_by_config",
    "get_domains",
    "update_domain",
    # Matching
    "candidate_names",
    "extract_host",
    "is_valid_host",
    "root_domain",
]
