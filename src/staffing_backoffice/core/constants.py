"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from decimal import Decimal

# Compensation multipliers, owned by the compensation calculator.
WEEKEND_RATE_MULTIPLIER = Decimal("2.0")
HOLIDAY_RATE_MULTIPLIER = Decimal("2.0")
OVERTIME_RATE_MULTIPLIER = Decimal("1.5")

STANDARD_WORK_HOURS = Decimal("8")

# Monetary precision of every persisted or returned amount.
MONEY_PLACES = Decimal("0.01")

MIN_ATTENDANCE_YEAR = 2020
MAX_YEAR = 2100

DEFAULT_COMMISSION_PERCENTAGE = Decimal("0")
DEFAULT_ACCESS_TOKEN_MINUTES = 60
DEFAULT_INVOICE_LIST_LIMIT = 200
