# Overview: Utility functions for capability lookups and role checks.

from .definitions import CAPABILITY_DEFINITIONS, Role, Capability
from .roles import ROLE_CAPABILITIES


def parse_role(value) -> Role:
    """Coerce a role name to Role. Raises ValueError for unknown names."""
    if isinstance(value, Role):
        return value
    return Role(str(value).strip().upper())


def capabilities_for_role(role) -> frozenset:
    """All capabilities granted to a role (empty for unknown roles)."""
    try:
        return ROLE_CAPABILITIES.get(parse_role(role), frozenset())
    except ValueError:
        return frozenset()


def can(role, capability) -> bool:
    """Single decision point for role x capability access."""
    try:
        capability = Capability(capability)
    except ValueError:
        return False
    return capability in capabilities_for_role(role)


def get_capability_definition(code):
    """Get full definition for a capability code."""
    for cap in CAPABILITY_DEFINITIONS:
        if cap[0] == code:
            return {
                "code": cap[0].value,
                "name": cap[1],
                "description": cap[2],
                "category": cap[3],
            }
    return None
