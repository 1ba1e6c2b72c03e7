# Overview: Capability category constants for grouping related capabilities.


class CapabilityCategory:
    """Capability categories for organization and UI display."""
    GENERAL = "GENERAL"
    SALES = "SALES"
    MEMBERS = "MEMBERS"
    INVENTORY = "INVENTORY"
    FINANCIALS = "FINANCIALS"
    STAFF = "STAFF"
