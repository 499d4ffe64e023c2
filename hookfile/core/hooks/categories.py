"""
Hook category taxonomy.

Every hook a hookfile may declare, and where it may be declared.
"""

from enum import Enum


class HookCategory(str, Enum):
    """Named extension points a hookfile can customize."""

    # Composable: global and project implementations both run
    READ_PACKAGE = "read_package"
    AFTER_ALL_RESOLVED = "after_all_resolved"
    FILTER_LOG = "filter_log"

    # Global only: install mechanics, pre-resolution and fetching
    IMPORT_PACKAGE = "import_package"
    PRE_RESOLUTION = "pre_resolution"
    FETCHERS = "fetchers"


# Categories collected into ordered sequences (global first, then project)
MULTI_VALUE_CATEGORIES = (
    HookCategory.READ_PACKAGE,
    HookCategory.AFTER_ALL_RESOLVED,
    HookCategory.FILTER_LOG,
)

# Categories taken from the global hookfile only
GLOBAL_ONLY_CATEGORIES = (
    HookCategory.IMPORT_PACKAGE,
    HookCategory.PRE_RESOLUTION,
    HookCategory.FETCHERS,
)
