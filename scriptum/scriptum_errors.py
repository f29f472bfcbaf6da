"""
Error taxonomy for the scriptum runtime type discipline.

Every error is raised at the point of detection and never recovered inside
the package. Each class also derives from the closest built-in exception so
callers may catch either the scriptum kind or the standard one.
"""


class ScriptumError(Exception):
    """Base class for all scriptum errors."""
    pass


class ArgTypeError(ScriptumError, TypeError):
    """An argument (or an inserted container element) has the wrong type."""
    pass


class ArgValueError(ScriptumError, ValueError):
    """An argument is well-typed but semantically invalid."""
    pass


class ArityError(ScriptumError, TypeError):
    """A call supplied a different number of arguments than declared."""
    pass


class ReturnTypeError(ScriptumError, TypeError):
    """A guarded function returned a value of an invalid type."""
    pass


class TypeCoercionError(ScriptumError, TypeError):
    """A disciplined wrapper was implicitly converted to a primitive."""
    pass


class OverloadError(ScriptumError, LookupError):
    """No implementation is registered for a computed dispatch key."""
    pass


class IndexGapError(ScriptumError, TypeError):
    """A homogeneous list mutation would leave a gap in the index."""
    pass
