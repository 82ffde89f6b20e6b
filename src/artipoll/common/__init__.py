__all__ = [
    "constants",
    "version",
    "logging",
    "util",
]

import artipoll.common.constants as constants
import artipoll.common.logging as logging
import artipoll.common.util as util
import artipoll.common.version as version
