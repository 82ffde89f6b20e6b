__all__ = ["client"]

import artipoll.registry.client as client
