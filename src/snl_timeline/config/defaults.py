"""Default configuration values for snl-timeline.

This module centralizes all hard-coded default values used throughout
the library, making them easy to discover and modify.
"""

# Storage layout
DEFAULT_DATABASE = "timeline"
DEFAULT_ENTITY = "entries"
DEFAULT_PARTITION_SCHEME = "flat"
DEFAULT_INCLUDE_TIME_IN_KEY = True

# Paging
DEFAULT_PAGE_SIZE = 50
DEFAULT_MAX_PAGE_SIZE = 1000
DEFAULT_RECENT_LIMIT = 10

# Search
DEFAULT_SEARCH_MIN_TERM_LENGTH = 2
DEFAULT_STORE_SIDE_SEARCH = False

# Retention
DEFAULT_RETENTION_DAYS = 90

# Namespaces
NAMESPACE_MAX_LENGTH = 100

# Relevance weights, one hit per field
WEIGHT_ACTION = 3
WEIGHT_INPUT_SUMMARY = 2
WEIGHT_OUTPUT_SUMMARY = 2
WEIGHT_TAG = 2
WEIGHT_CATEGORY = 1
WEIGHT_ERROR_MESSAGE = 1

# Validation ranges
PAGE_SIZE_MIN = 1
SEARCH_MIN_TERM_LENGTH_MAX = 50
RETENTION_DAYS_MIN = 1
