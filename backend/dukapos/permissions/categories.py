# Overview: Permission category constants for grouping related actions.


class PermissionCategory:
    """Action categories for organization and UI display."""
    USERS = "USERS"
    BUSINESS = "BUSINESS"
    INVENTORY = "INVENTORY"
    CUSTOMERS = "CUSTOMERS"
    SALES = "SALES"
    EXPENSES = "EXPENSES"
    ANALYTICS = "ANALYTICS"
    PLATFORM = "PLATFORM"
