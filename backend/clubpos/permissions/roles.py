# Overview: Role to capability table. The only place role access is decided.

from .definitions import Role, Capability


ROLE_CAPABILITIES = {
    # Admin gets every capability
    Role.ADMIN: frozenset(Capability),

    Role.SALES: frozenset({
        Capability.VIEW_DASHBOARD,
        Capability.USE_ASSISTANT,
        Capability.USE_POS,
        Capability.VIEW_TRANSACTIONS,
        Capability.MANAGE_MEMBERS,
        Capability.TOP_UP_WALLET,
        Capability.VIEW_INVENTORY,
    }),

    Role.INVENTORY: frozenset({
        Capability.VIEW_DASHBOARD,
        Capability.USE_ASSISTANT,
        Capability.VIEW_INVENTORY,
        Capability.EDIT_INVENTORY,
        Capability.VIEW_STOCK_ALERTS,
    }),
}
