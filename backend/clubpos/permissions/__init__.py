# Overview: Role/capability permission package.
# Re-exports all public APIs.

from .categories import CapabilityCategory
from .definitions import (
    Role,
    Capability,
    CAPABILITY_DEFINITIONS,
    GENERAL_CAPABILITIES,
    SALES_CAPABILITIES,
    MEMBER_CAPABILITIES,
    INVENTORY_CAPABILITIES,
    FINANCIAL_CAPABILITIES,
    STAFF_CAPABILITIES,
)
from .roles import ROLE_CAPABILITIES
from .helpers import (
    can,
    capabilities_for_role,
    parse_role,
    get_capability_definition,
)

__all__ = [
    "CapabilityCategory",
    "Role",
    "Capability",
    "CAPABILITY_DEFINITIONS",
    "GENERAL_CAPABILITIES",
    "SALES_CAPABILITIES",
    "MEMBER_CAPABILITIES",
    "INVENTORY_CAPABILITIES",
    "FINANCIAL_CAPABILITIES",
    "STAFF_CAPABILITIES",
    "ROLE_CAPABILITIES",
    "can",
    "capabilities_for_role",
    "parse_role",
    "get_capability_definition",
]
