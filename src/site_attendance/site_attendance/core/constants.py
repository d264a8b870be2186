"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

STANDARD_WORKDAY_HOURS = 8
ABSENCE_CUTOFF_HOUR = 18

DEFAULT_MAX_RETRIES = 3
RETRY_BACKOFF_SECONDS = 2.0
RETRY_PACING_SECONDS = 1.0

MIN_PASSWORD_LENGTH = 6
DEFAULT_TEMP_EMAIL_DOMAIN = "temp.local"
DEFAULT_LIST_LIMIT = 200

DEFAULT_BIN_CAPACITY_KG = 50

WASTE_ISSUE_OPTIONS = ("Lechate", "Smell", "Product Damage", "Flies")
WASTE_REMARK_OPTIONS = ("Harvesting Next week", "Issues Reporting")
OTHER_OPTION = "Other"
WASTE_FORM_PERIODS = ("all", "today", "week", "month")
