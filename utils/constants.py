from decimal import Decimal

APP_NAME = "Recurring Budget"
DB_FILE = "budget.db"
DATE_FORMAT = "%Y-%m-%d"

ONE_TIME = "one-time"
RECURRING_FREQUENCIES = ["weekly", "fortnightly", "monthly"]
WEEK_INTERVALS = {
    "weekly": 7,
    "fortnightly": 14,
}

# Average occurrences per month, used for monthly totals
MONTHLY_FACTORS = {
    "weekly": Decimal("4.33"),
    "fortnightly": Decimal("2.17"),
    "monthly": Decimal("1"),
}

MAX_AMOUNT = Decimal("999999.99")
MAX_DESCRIPTION_LENGTH = 100

# Namespace keys of the template collections in the local key-value store
TEMPLATE_STORAGE_KEYS = {
    "expense": "recurring_expenses",
    "income": "recurring_incomes",
}
TEMPLATE_ID_PREFIXES = {
    "expense": "recurring_expense",
    "income": "recurring_income",
}
