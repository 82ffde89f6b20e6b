__all__ = ["core", "store"]

import artipoll.snapshot.core as core
import artipoll.snapshot.store as store
