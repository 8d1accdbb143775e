"""
Core constants for the fly directory index
"""

# Configuration file names (config dir holds both, roots may hold .flyIgnore)
ROOTS_FILENAME = ".flyRoots"
DATABASE_FILENAME = "index.sqlite"

# Directory names used when no environment override is present
APP_DIR_NAME = "fly"

# Environment overrides
CONFIG_DIR_ENV = "FLY_CONFIG_DIR"
DATA_DIR_ENV = "FLY_DATA_DIR"

# Number of distinct basenames offered by the closest-match fallback
FUZZY_MATCH_LIMIT = 5
