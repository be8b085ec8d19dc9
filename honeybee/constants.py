# HONEYBEE/backend/honeybee/constants.py

MONTHS_SHORT = [
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"
]

# Employee roles
ROLE_ADMIN = "admin"
ROLE_MANAGER = "manager"
ROLE_EMPLOYEE = "employee"
ROLES = (ROLE_ADMIN, ROLE_MANAGER, ROLE_EMPLOYEE)
EMPLOYEE_MANAGER_ROLES = frozenset([ROLE_ADMIN, ROLE_MANAGER])

# Analytics windows, in months, ending at the reference month
TIME_RANGES = {
    "1month": 1,
    "3months": 3,
    "6months": 6,
    "1year": 12,
}

INVOICE_STATUSES = ["draft", "sent", "paid", "overdue", "cancelled"]
PENDING_INVOICE_STATUSES = frozenset(["sent", "overdue"])

PAYMENT_STATUSES = ["completed", "pending", "failed", "refunded"]
PAYMENT_METHODS = {
    "cash": "Cash",
    "card": "Card",
    "bank_transfer": "Bank transfer",
    "check": "Check",
    "other": "Other",
}

PRODUCT_STATUSES = ["active", "inactive", "low-stock"]
LOW_STOCK_THRESHOLD = 10

# Customer segments by lifetime spend rank
SEGMENT_ENTERPRISE = "Enterprise"
SEGMENT_SMB = "SMB"
SEGMENT_INDIVIDUAL = "Individual"
# Rank boundaries in percent of customers: top 20% Enterprise, next 40% SMB
ENTERPRISE_PERCENT = 20
SMB_PERCENT = 40

# Placeholder margin heuristic for product performance
PRODUCT_MARGIN_RATE = 0.3

INVOICE_NUMBER_PREFIX = "INV"
PAYMENT_NUMBER_PREFIX = "PAY"
