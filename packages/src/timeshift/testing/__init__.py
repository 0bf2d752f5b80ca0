"""Public test-support utilities for timeshift.

Re-exports test doubles and factories so that consumer test suites
can import everything from a single ``timeshift.testing`` namespace
instead of reaching into private modules.

Provided symbols:

- :class:`Traveler` — manually steppable frozen clock.
- :class:`StaticProvider` — in-memory directive provider.
- :func:`make_settings` — factory for ``Settings`` without ``.env`` files.
"""

from timeshift.testing._provider import StaticProvider
from timeshift.testing._settings import make_settings
from timeshift.testing._traveler import Traveler

__all__ = [
    "StaticProvider",
    "Traveler",
    "make_settings",
]
