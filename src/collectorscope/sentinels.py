"""Sentinel for distinguishing absent configuration keys from explicit nulls.

A YAML block such as ``endpoint:`` decodes to ``None``, which is different
from the key not being there at all.

Example usage:
    from collectorscope.sentinels import MISSING

    value = tree.lookup("endpoint")
    if value is MISSING:
        # Key was not present
        ...
    elif value is None:
        # Key was present but null
        ...
"""

from typing import Final


class MissingSentinel:
    """Sentinel class for absent keys.

    This is a singleton - use the MISSING instance, not the class directly.
    Comparison should always use `is` identity, never equality.
    """

    __slots__ = ()

    def __repr__(self) -> str:
        return "<MISSING>"

    def __bool__(self) -> bool:
        return False


MISSING: Final[MissingSentinel] = MissingSentinel()
"""Singleton sentinel indicating a key was not found.

Use identity comparison: `if value is MISSING:`
"""
