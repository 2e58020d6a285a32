"""
Exceptions raised by label map operations.

All of them derive from LabelMapError and also from the closest builtin,
so callers can catch either.
"""


class LabelMapError(Exception):
    pass


class BackgroundLabelError(LabelMapError, ValueError):
    """A label-targeted operation was given the background value."""


class NotFoundError(LabelMapError, LookupError):
    """No label object for the requested label or position."""


class NullHandleError(LabelMapError, TypeError):
    """A label object argument is None."""


class FullError(LabelMapError):
    """Every usable label value is taken."""


class OutOfRangeError(LabelMapError, IndexError):
    pass


class TypeMismatchError(LabelMapError, TypeError):
    """Graft source is not the same concrete type."""


class LabelRangeError(LabelMapError, ValueError):
    """Label value does not fit the label dtype."""
