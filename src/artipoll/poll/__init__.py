__all__ = ["ops"]

import artipoll.poll.ops as ops
