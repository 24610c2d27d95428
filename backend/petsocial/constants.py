"""
PetSocial Global Constants

Centralized location for system-wide constants used across the application.
"""

# Application Constants
APP_NAME = "PetSocial API"
APP_VERSION = "0.1.0"

# Lookup cache
LOOKUP_CACHE_TTL_SECONDS = 3600

PET_TYPES_CACHE_KEY = "pet-types"
COLORS_CACHE_KEY = "colors"
FOODS_CACHE_KEY = "foods"
USER_TYPES_CACHE_KEY = "user-types"
BREEDS_CACHE_KEY_PREFIX = "breeds-"

# Largest id the store accepts (signed 64-bit)
MAX_ENTITY_ID = 2**63 - 1
MAX_SORT_ORDER = 2**31 - 1

# Default sort order assigned by the store when none is supplied
DEFAULT_SORT_ORDER = 9999

# Rows the admin surface refuses to delete (compared case-insensitively)
PROTECTED_PET_TYPE_NAMES = frozenset({"other"})
PROTECTED_BREED_NAMES = frozenset({"other", "mix breed"})
PROTECTED_COLOR_NAMES = frozenset({"other", "mix color"})
PROTECTED_FOOD_NAMES = frozenset({"other"})
PROTECTED_USER_TYPE_NAMES = frozenset({"pet owner"})
