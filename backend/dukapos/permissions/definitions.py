# Overview: All action definitions organized by category.
# Each action is defined as: (code, name, description, category)

from .categories import PermissionCategory


LIST_USERS = "LIST_USERS"
CREATE_USER = "CREATE_USER"
VIEW_USER = "VIEW_USER"
UPDATE_USER_STATUS = "UPDATE_USER_STATUS"
DELETE_USER = "DELETE_USER"

MANAGE_BUSINESS = "MANAGE_BUSINESS"
MANAGE_PRODUCTS = "MANAGE_PRODUCTS"
MANAGE_CATEGORIES = "MANAGE_CATEGORIES"
MANAGE_CUSTOMERS = "MANAGE_CUSTOMERS"
CREATE_SALE = "CREATE_SALE"
VIEW_SALES = "VIEW_SALES"
MANAGE_EXPENSES = "MANAGE_EXPENSES"
VIEW_BUSINESS_ANALYTICS = "VIEW_BUSINESS_ANALYTICS"

VIEW_MERCHANT_OVERVIEW = "VIEW_MERCHANT_OVERVIEW"
VIEW_PLATFORM_OVERVIEW = "VIEW_PLATFORM_OVERVIEW"
VIEW_PLATFORM_GROWTH = "VIEW_PLATFORM_GROWTH"


# -- USERS --

USER_PERMISSIONS = [
    (LIST_USERS, "List Users", "List user accounts within the caller's managed roles", PermissionCategory.USERS),
    (CREATE_USER, "Create User", "Provision accounts of the roles the caller may create", PermissionCategory.USERS),
    (VIEW_USER, "View User", "View a single user account", PermissionCategory.USERS),
    (UPDATE_USER_STATUS, "Update User Status", "Activate, deactivate, or suspend accounts", PermissionCategory.USERS),
    (DELETE_USER, "Delete User", "Permanently delete a user account", PermissionCategory.USERS),
]

# -- BUSINESS-SCOPED --

BUSINESS_PERMISSIONS = [
    (MANAGE_BUSINESS, "Manage Business", "Create and edit the caller's own business", PermissionCategory.BUSINESS),
    (MANAGE_PRODUCTS, "Manage Products", "Create, edit, and delete products and services", PermissionCategory.INVENTORY),
    (MANAGE_CATEGORIES, "Manage Categories", "Create and list product categories", PermissionCategory.INVENTORY),
    (MANAGE_CUSTOMERS, "Manage Customers", "Create, edit, and delete customers", PermissionCategory.CUSTOMERS),
    (CREATE_SALE, "Create Sale", "Record a sale and decrement stock", PermissionCategory.SALES),
    (VIEW_SALES, "View Sales", "List and inspect recorded sales", PermissionCategory.SALES),
    (MANAGE_EXPENSES, "Manage Expenses", "Record, edit, and delete expenses", PermissionCategory.EXPENSES),
    (VIEW_BUSINESS_ANALYTICS, "View Analytics", "Dashboard statistics and weekly sales", PermissionCategory.ANALYTICS),
]

# -- PLATFORM --

PLATFORM_PERMISSIONS = [
    (VIEW_MERCHANT_OVERVIEW, "View Merchant Overview", "Merchant counts, merchant list, merchant activity", PermissionCategory.PLATFORM),
    (VIEW_PLATFORM_OVERVIEW, "View Platform Overview", "Platform-wide statistics and activity", PermissionCategory.PLATFORM),
    (VIEW_PLATFORM_GROWTH, "View Platform Growth", "Month-over-month sales growth across all businesses", PermissionCategory.PLATFORM),
]


PERMISSION_DEFINITIONS = USER_PERMISSIONS + BUSINESS_PERMISSIONS + PLATFORM_PERMISSIONS

BUSINESS_SCOPED_ACTIONS = frozenset(perm[0] for perm in BUSINESS_PERMISSIONS)
