"""Custom exception hierarchy for synergos.

The core degrades gracefully: bad numbers are clamped, unknown ids are
no-ops. These exceptions cover lifecycle misuse and request-level
validation in the operations layer only.
"""


class SynergosError(Exception):
    """Base for all synergos errors."""


class EngineStateError(SynergosError):
    """Engine lifecycle call made in the wrong state."""


class InputError(SynergosError):
    """A request is missing a field it cannot be served without."""
