"""
Core constants and limits.

Defines system-wide constants used by the accounting engine, the editing
layer and the report surfaces.
"""

# Lot Ledger
LOT_EPSILON = 0.0001  # Lots with fewer remaining shares are dropped from the queue
COST_TOLERANCE = 1e-6  # Tolerance used when checking cost conservation

# Dividend annualization
DEFAULT_DIVIDEND_FREQUENCY = 1  # Payouts per year when metadata is missing
DIVIDEND_REMITTANCE_FEE = 10.0  # Flat bank fee deducted from imported distributions

# Compound Growth Simulator
DEFAULT_SIMULATION_FREQUENCY = 4  # Payouts per year assumed by the simulator
DEFAULT_PROJECTION_YEARS = 20
MAX_PROJECTION_YEARS = 100
MONTHS_PER_YEAR = 12

# Net-worth overlay
DEFAULT_NET_WORTH_START_YEAR = 2021
DEFAULT_BASELINE_PROJECTION_YEARS = 30
DEFAULT_EXPECTED_PNL_RATE = 5.0
DEFAULT_EXPECTED_DIVIDEND_RATE = 5.0

# Strategy lab defaults for auto-generated strategies
AUTO_STRATEGY_ID_PREFIX = "auto-"
AUTO_STRATEGY_EX_DIV_EXTRA = 10000.0
AUTO_STRATEGY_ANNUAL_RETURN = 8.0
AUTO_STRATEGY_DEFAULT_YIELD = 5.0

# Dashboard rankings
CONTRIBUTION_RANK_SIZE = 3

# Settings defaults
DEFAULT_CURRENCY = "TWD"
DEFAULT_TRANSACTION_FEE_RATE = 0.001425
DEFAULT_TAX_RATE = 0.001

# Calculation cache
DEFAULT_CALCULATION_CACHE_SIZE = 128

# Backup file
BACKUP_EXPORT_DATE_KEY = "exportDate"

# Data file used by the API and CLI when none is given
DEFAULT_DATA_FILE = "portfolio.json"
DATA_FILE_ENV_VAR = "LEDGER_DATA_FILE"
