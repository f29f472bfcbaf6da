"""
Overloaded operations: a dictionary-passing stand-in for type classes.

An `Overload` owns an instance table mapping dispatch keys to
implementations. Each call computes the key of its argument at call time and
resolves the implementation with a single lookup; there is no static
resolution and no fallback. Implementations may be functions, which are
applied to the argument, or plain values, which are returned as they are
(for nullary members such as `empty` or `min_bound`).
"""
import logging
from typing import Any, Callable, Dict, Optional

from scriptum.scriptum_errors import ArgTypeError, OverloadError
from scriptum.scriptum_guard import guard
from scriptum.scriptum_introspect import function_name, to_type_tag
from scriptum.scriptum_printer import format_message, ordinal, stringify
from scriptum.scriptum_runtime import GuardContext, get_context

logger = logging.getLogger(__name__)


def dispatcher(x: Any) -> str:
    """Default dispatch key: a function's own name, else the value's type tag."""
    if callable(x):
        return function_name(x)
    return to_type_tag(x)


def dispatcher2(x: Any, y: Any) -> str:
    """Default binary dispatch key, e.g. ``Number/String``."""
    return f"{dispatcher(x)}/{dispatcher(y)}"


def _check_declaration(context: GuardContext, owner: str, name, dispatch):
    for n, (value, ok, type_name) in enumerate((
            (name, isinstance(name, str), "String"),
            (dispatch, callable(dispatch), "Function"))):
        if not ok:
            raise ArgTypeError(format_message(
                "invalid argument type",
                f"{owner} expects an argument of type {type_name}",
                f"on the 1st call\nin the {ordinal(n + 1)} argument",
                f"but {context.describe(value)} received"))


class Overload:
    """A named operation dispatched on its single argument."""

    def __init__(self, name: str, dispatch: Callable = dispatcher, *,
                 context: Optional[GuardContext] = None):
        self._context = context
        _check_declaration(self.context, "overload", name, dispatch)
        self.name = name
        self.__name__ = name
        self.dispatch = dispatch
        self.instances: Dict[Any, Any] = {}
        self.register = guard(f"{name}Add", self._register, context=context)
        self.call = guard(name, self._call, context=context)

    @property
    def context(self) -> GuardContext:
        """The bound context, else whichever context is current."""
        return self._context or get_context()

    def _register(self, key, impl):
        self.instances[key] = impl
        logger.debug("%s: registered %s", self.name, key)
        return self.instances

    def _resolve(self, key, *args):
        try:
            return self.instances[key]
        except KeyError:
            raise OverloadError(self._unresolved(key, *args)) from None
        except TypeError as e:  # unhashable key
            raise OverloadError(self._unresolved(key, *args)) from e

    def _unresolved(self, key, x) -> str:
        return format_message(
            "invalid overloaded function call",
            f"{self.name} cannot dispatch on {stringify(key)}",
            "on the 1st call\nin the 1st argument",
            f"for the given value of type {self.context.describe(x)}")

    def _call(self, x):
        key = self.dispatch(x)
        logger.debug("%s dispatches on %r", self.name, key)
        impl = self._resolve(key, x)
        if callable(impl):
            return impl(x)
        return impl

    def __call__(self, x):
        return self.call(x)

    def __contains__(self, key) -> bool:
        return key in self.instances

    def keys(self):
        return self.instances.keys()

    def __repr__(self) -> str:
        return f"<Overload name={self.name!r} instances={len(self.instances)}>"


class BinaryOverload(Overload):
    """A named operation dispatched on the pair of its two curried arguments.

    ``op(x)(y)`` dispatches once both arguments are known; a function
    implementation is applied the same way, as ``impl(x)(y)``.
    """

    def __init__(self, name: str, dispatch: Callable = dispatcher2, *,
                 context: Optional[GuardContext] = None):
        super().__init__(name, dispatch, context=context)

    def _unresolved(self, key, x, y) -> str:
        return format_message(
            "invalid overloaded function call",
            f"{self.name} cannot dispatch on {stringify(key)}",
            "on the 2nd call\nin the 1st/2nd argument",
            f"for the given values of type "
            f"{self.context.describe(x)}/{self.context.describe(y)}")

    def _call(self, x):
        return lambda y: self._apply(x, y)

    def _apply(self, x, y):
        key = self.dispatch(x, y)
        logger.debug("%s dispatches on %r", self.name, key)
        impl = self._resolve(key, x, y)
        if callable(impl):
            return impl(x)(y)
        return impl


def overload(name: str, dispatch: Callable = dispatcher, *,
             context: Optional[GuardContext] = None) -> Overload:
    return Overload(name, dispatch, context=context)


def overload2(name: str, dispatch: Callable = dispatcher2, *,
              context: Optional[GuardContext] = None) -> BinaryOverload:
    return BinaryOverload(name, dispatch, context=context)
