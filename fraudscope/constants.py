"""
Shared constants across detection and generation
"""

# Card testing
CARD_TESTING_MAX_AMOUNT = 500  # Under $5
CARD_TESTING_MIN_COUNT = 5
CARD_TESTING_WINDOW_SEC = 3600

# Velocity
VELOCITY_WINDOW_SEC = 1800
VELOCITY_MIN_COUNT = 8

# Geography
HIGH_RISK_COUNTRIES = ['NG', 'GH', 'PK', 'BD', 'ID', 'RU']
HIGH_RISK_GEOGRAPHY_MIN_COUNT = 3

# Round numbers: (divisor, minimum amount) in minor units
ROUND_AMOUNT_RULES = [
    (100000, 100000),  # $1000+ multiples
    (50000, 250000),   # $2500+ in $500 multiples
    (25000, 500000),   # $5000+ in $250 multiples
]
ROUND_NUMBER_MIN_COUNT = 3

# Off-hours (local time)
OFF_HOURS_START = 23
OFF_HOURS_END = 5
OFF_HOURS_COUNTRIES = ['RU', 'CN', 'PK', 'NG']
OFF_HOURS_MIN_COUNT = 2

# Retry attacks
RETRY_MIN_FAILURES = 5

# High-value international
HIGH_VALUE_MIN_AMOUNT = 500000  # $5000
COMMON_COUNTRIES = ['US', 'CA', 'GB', 'AU', 'DE', 'FR']
HIGH_VALUE_INTL_MIN_COUNT = 2

# Cryptocurrency
CRYPTO_MERCHANT_CATEGORY = 'cryptocurrency'
CRYPTO_KEYWORDS = ['bitcoin', 'crypto']
CRYPTO_ANONYMOUS_COUNTRY = 'VPN'
CRYPTO_MIN_TOTAL = 500000        # $5k
CRYPTO_CRITICAL_TOTAL = 1000000  # $10k

# Risk score bands (metadata.risk_score)
RISK_SCORE_CRITICAL = 85
RISK_SCORE_HIGH = 70
RISK_SCORE_MEDIUM = 40

# Generator limits
MIN_TRANSACTION_COUNT = 1
MAX_TRANSACTION_COUNT = 10000
PERCENTAGE_TOLERANCE = 0.01
