"""Financial and product constants shared by the projection engine."""

# Deposit: length of the "high key rate" phase before the rate drops (3 years).
DEPOSIT_PHASE_MONTHS = 36

# Deposit: yield multiplier after the high-rate phase (tax + inflation drag).
TAX_DRAG_COEFFICIENT = 0.85

# Deposit: annual rate once the high-rate phase is over.
TARGET_DEPOSIT_RATE_AFTER_PHASE = 0.08

# Deposit: tax on interest income and the yearly tax-exempt interest allowance (RUB).
DEPOSIT_TAX_RATE = 0.13
DEPOSIT_INTEREST_EXEMPTION_PER_YEAR_RUB = 180_000

# Annual rent indexation used for the "saved rent" stream and deposit withdrawals.
RENT_INFLATION_RATE = 0.05

# Annual reinvest rate for the rent-capitalization hint.
RENT_REINVEST_RATE = 0.08

DEFAULT_DEPOSIT_RATE = 0.18
DEFAULT_APPRECIATION_PERCENT = 6.0

# Mortgage tax deductions.
INCOME_TAX_RATE = 0.13
PROPERTY_DEDUCTION_LIMIT = 2_000_000
MORTGAGE_INTEREST_DEDUCTION_LIMIT = 3_000_000
PROPERTY_REFUND_CAP = 260_000
INTEREST_REFUND_CAP = 390_000

# Default share of gross rent eaten by expenses (utilities, tax, repairs).
DEFAULT_EXPENSE_RATIO = 0.2

# Risk scenario "stagnation": price drops 12% linearly over the first 24 months.
STAGNATION_DROP_PERCENT = 0.12
STAGNATION_MONTHS = 24

# Risk scenario "hyperinflation": rent is indexed 15% a year.
HYPERINFLATION_RENT_RATE = 0.15

# Insight windows.
HORIZON_MONTHS = 240
SMART_INSIGHTS_MONTHS = 120
MIN_DISPLAY_RATIO = 1.1

# Largest object price / starting capital accepted from a request (RUB).
MAX_PRICE_RUB = 100_000_000
