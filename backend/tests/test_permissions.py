"""Role x capability table checks."""

import pytest

from clubpos.permissions import (
    CAPABILITY_DEFINITIONS,
    Capability,
    Role,
    can,
    capabilities_for_role,
    get_capability_definition,
    parse_role,
)


def test_admin_has_every_capability():
    assert all(can(Role.ADMIN, cap) for cap in Capability)


@pytest.mark.parametrize("capability,sales,inventory", [
    (Capability.USE_POS, True, False),
    (Capability.TOP_UP_WALLET, True, False),
    (Capability.MANAGE_MEMBERS, True, False),
    (Capability.VIEW_TRANSACTIONS, True, False),
    (Capability.VIEW_INVENTORY, True, True),
    (Capability.EDIT_INVENTORY, False, True),
    (Capability.VIEW_STOCK_ALERTS, False, True),
    (Capability.VIEW_FINANCIALS, False, False),
    (Capability.MANAGE_STAFF, False, False),
    (Capability.VIEW_DASHBOARD, True, True),
    (Capability.USE_ASSISTANT, True, True),
])
def test_role_table(capability, sales, inventory):
    assert can(Role.SALES, capability) is sales
    assert can(Role.INVENTORY, capability) is inventory


def test_accepts_role_and_capability_names():
    assert can("sales", "USE_POS")
    assert parse_role(" inventory ") is Role.INVENTORY


def test_unknown_role_or_capability_is_denied():
    assert capabilities_for_role("CLEANER") == frozenset()
    assert not can("CLEANER", Capability.USE_POS)
    assert not can(Role.ADMIN, "LAUNCH_ROCKETS")


def test_every_capability_has_a_definition():
    defined = {cap[0] for cap in CAPABILITY_DEFINITIONS}
    assert defined == set(Capability)
    assert get_capability_definition(Capability.USE_POS)["code"] == "USE_POS"
