# Overview: Role and capability enums plus capability definitions.
# Each capability is defined as: (capability, name, description, category)

from enum import Enum

from .categories import CapabilityCategory


class Role(str, Enum):
    ADMIN = "ADMIN"
    INVENTORY = "INVENTORY"
    SALES = "SALES"


class Capability(str, Enum):
    VIEW_DASHBOARD = "VIEW_DASHBOARD"
    USE_ASSISTANT = "USE_ASSISTANT"
    USE_POS = "USE_POS"
    MANAGE_MEMBERS = "MANAGE_MEMBERS"
    TOP_UP_WALLET = "TOP_UP_WALLET"
    VIEW_TRANSACTIONS = "VIEW_TRANSACTIONS"
    VIEW_INVENTORY = "VIEW_INVENTORY"
    EDIT_INVENTORY = "EDIT_INVENTORY"
    VIEW_STOCK_ALERTS = "VIEW_STOCK_ALERTS"
    VIEW_FINANCIALS = "VIEW_FINANCIALS"
    MANAGE_STAFF = "MANAGE_STAFF"


# -- GENERAL --

GENERAL_CAPABILITIES = [
    (
        Capability.VIEW_DASHBOARD,
        "View Dashboard",
        "Open the landing dashboard",
        CapabilityCategory.GENERAL,
    ),
    (
        Capability.USE_ASSISTANT,
        "Use Assistant",
        "Read the catalog context handed to the assistant",
        CapabilityCategory.GENERAL,
    ),
]


# -- SALES --

SALES_CAPABILITIES = [
    (
        Capability.USE_POS,
        "Use POS",
        "Build carts and check out against member wallets",
        CapabilityCategory.SALES,
    ),
    (
        Capability.VIEW_TRANSACTIONS,
        "View Transactions",
        "See recent ledger transactions and receipts",
        CapabilityCategory.SALES,
    ),
]


# -- MEMBERS --

MEMBER_CAPABILITIES = [
    (
        Capability.MANAGE_MEMBERS,
        "Manage Members",
        "Register members and browse the member directory",
        CapabilityCategory.MEMBERS,
    ),
    (
        Capability.TOP_UP_WALLET,
        "Top Up Wallet",
        "Credit a member wallet (DEPOSIT transaction)",
        CapabilityCategory.MEMBERS,
    ),
]


# -- INVENTORY --

INVENTORY_CAPABILITIES = [
    (
        Capability.VIEW_INVENTORY,
        "View Inventory",
        "Browse products, stock and prices",
        CapabilityCategory.INVENTORY,
    ),
    (
        Capability.EDIT_INVENTORY,
        "Edit Inventory",
        "Create products and overwrite stock or price",
        CapabilityCategory.INVENTORY,
    ),
    (
        Capability.VIEW_STOCK_ALERTS,
        "View Stock Alerts",
        "See low-stock alerts on the dashboard",
        CapabilityCategory.INVENTORY,
    ),
]


# -- FINANCIALS --

FINANCIAL_CAPABILITIES = [
    (
        Capability.VIEW_FINANCIALS,
        "View Financials",
        "See sales totals and transaction amounts",
        CapabilityCategory.FINANCIALS,
    ),
]


# -- STAFF --

STAFF_CAPABILITIES = [
    (
        Capability.MANAGE_STAFF,
        "Manage Staff",
        "Create, edit and remove staff accounts",
        CapabilityCategory.STAFF,
    ),
]


CAPABILITY_DEFINITIONS = (
    GENERAL_CAPABILITIES
    + SALES_CAPABILITIES
    + MEMBER_CAPABILITIES
    + INVENTORY_CAPABILITIES
    + FINANCIAL_CAPABILITIES
    + STAFF_CAPABILITIES
)
