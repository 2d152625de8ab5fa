"""Client and request executor.

Classes:
    :class:`NGAClient` -- the public entry point, owning the facades.
    :class:`Executor` -- runs request descriptors: auth, cache, transport.
"""

from ngakit.client.client import NGAClient
from ngakit.client.executor import Executor

__all__ = ["Executor", "NGAClient"]
