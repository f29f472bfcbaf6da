"""
Guarded calls: a callable proxy that verifies every invocation.

Each call through a `GuardedFunction` checks the declared arity, rejects
arguments and results whose descriptor is an invalid marker (Undefined, NaN,
Infinity), and keeps a call log. A function returned from a guarded call is
wrapped again, so curried chains stay guarded step by step and their errors
show the steps taken so far. Only a call that produces a non-function value
counts as completed and lands in the context's call history.
"""
import collections.abc
import inspect
import logging
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

from scriptum.scriptum_errors import ArgTypeError, ArgValueError, ArityError, ReturnTypeError
from scriptum.scriptum_introspect import LOG, function_name, is_invalid
from scriptum.scriptum_printer import format_message, ordinal
from scriptum.scriptum_runtime import GuardContext, get_context

logger = logging.getLogger(__name__)

FIX = "fix"
VAR = "var"

_MISSING = object()


def required_params(fn: Callable) -> Optional[Tuple[str, ...]]:
    """Names of the positional parameters without defaults, or None when the
    signature cannot be inspected (some builtins)."""
    try:
        sig = inspect.signature(fn)
    except (TypeError, ValueError):
        return None
    return tuple(
        p.name for p in sig.parameters.values()
        if p.kind in (p.POSITIONAL_ONLY, p.POSITIONAL_OR_KEYWORD) and p.default is p.empty
    )


def takes_varargs(fn: Callable) -> bool:
    try:
        sig = inspect.signature(fn)
    except (TypeError, ValueError):
        return False
    return any(p.kind is p.VAR_POSITIONAL for p in sig.parameters.values())


def _is_continuation(r: Any) -> bool:
    return callable(r) and not isinstance(r, type)


class GuardedFunction:
    """Callable proxy around `fn` that checks each call.

    `params` is FIX (argument count must equal the declared arity) or VAR
    (argument count must reach it). `nth_call` counts the steps of a curried
    chain and `log` holds the records of the steps before this one.
    """

    def __init__(self, name: str, fn: Callable, log: Iterable[str] = (), *,
                 params: str = FIX, nth_call: int = 0,
                 context: Optional[GuardContext] = None):
        self.name = name
        self.fn = fn
        self.log: List[str] = list(log)
        self.params = params
        self.nth_call = nth_call
        self._context = context
        self.meta: Dict[Any, Any] = {LOG: self.log}
        self.__name__ = name
        self.__qualname__ = name
        self.__doc__ = getattr(fn, "__doc__", None)
        self.__wrapped__ = fn
        self._required = required_params(fn)

    @property
    def context(self) -> GuardContext:
        return self._context or get_context()

    def __call__(self, *args, **kwargs):
        if not self.context.enabled:
            return self.fn(*args, **kwargs)

        self._verify_arity(args, kwargs)
        arg_types = self._verify_arg_types(args, kwargs)

        r = self.fn(*args, **kwargs)

        self._verify_return_type(r)
        record = f"{self.name}({arg_types})"

        if _is_continuation(r):
            return self._continue(r, record)

        self.context.record_call(" -> ".join(self.log + [record]))
        return r

    def _continue(self, r: Callable, record: str) -> "GuardedFunction":
        fn = r.fn if isinstance(r, GuardedFunction) else r
        name = function_name(r) or self.name
        params = VAR if self.params == VAR or takes_varargs(fn) else FIX
        logger.debug("%s continues as %s on the %s call",
                     self.name, name, ordinal(self.nth_call + 2))
        return GuardedFunction(name, fn, self.log + [record],
                               params=params, nth_call=self.nth_call + 1,
                               context=self._context)

    def _fail(self, error_cls, headline: str, *paragraphs: str):
        raise error_cls(format_message(
            headline, *paragraphs,
            log=self.log, recent=self.context.recent_calls()))

    def _verify_arity(self, args: tuple, kwargs: dict):
        if self._required is None:
            return
        expected = len(self._required)
        received = len(args) + sum(1 for k in kwargs if k in self._required)
        nth = f"on the {ordinal(self.nth_call + 1)} call"

        if self.params == FIX and received != expected:
            self._fail(ArityError, "invalid function call arity",
                       f"{self.name} expects {expected}-ary Function",
                       nth,
                       f"but {received}-ary Function received")

        elif self.params == VAR and received < expected:
            self._fail(ArityError, "invalid function call arity",
                       f"{self.name} expects at least {expected}-ary Function",
                       nth,
                       f"but {received}-ary Function received")

    def _verify_arg_types(self, args: tuple, kwargs: dict) -> str:
        describe = self.context.describe
        types = []
        for n, arg in enumerate(args):
            t = describe(arg)
            if is_invalid(t):
                self._fail(ArgTypeError, "invalid argument type",
                           f"{self.name} received an argument of type {t}",
                           f"on the {ordinal(self.nth_call + 1)} call"
                           f"\nin the {ordinal(n + 1)} argument")
            types.append(t)
        for k, arg in kwargs.items():
            t = describe(arg)
            if is_invalid(t):
                self._fail(ArgTypeError, "invalid argument type",
                           f"{self.name} received an argument of type {t}",
                           f"on the {ordinal(self.nth_call + 1)} call"
                           f"\nin the argument {k!r}")
            types.append(f"{k}={t}")
        return ", ".join(types)

    def _verify_return_type(self, r: Any) -> str:
        t = self.context.describe(r)
        if is_invalid(t):
            self._fail(ReturnTypeError, "invalid return type",
                       f"{self.name} returned a value of type {t}",
                       f"on the {ordinal(self.nth_call + 1)} call")
        return t

    def __repr__(self) -> str:
        return f"<GuardedFunction {self.name} call={self.nth_call + 1}>"


def _expect_argument(context: GuardContext, owner: str, value: Any, ok: bool,
                     type_name: str, position: int):
    if not ok:
        raise ArgTypeError(format_message(
            "invalid argument type",
            f"{owner} expects an argument of type {type_name}",
            f"on the 1st call\nin the {ordinal(position)} argument",
            f"but {context.describe(value)} received"))


def guard(name, fn=_MISSING, *, variadic: Optional[bool] = None,
          context: Optional[GuardContext] = None):
    """Wraps `fn` in a GuardedFunction named `name`.

    Without `fn`, returns a decorator. A name prefixed with ``...`` (or a
    function taking ``*args``, or ``variadic=True``) selects variadic arity
    checking. When the context is not guarded, `fn` is returned unchanged.
    Without an explicit `context`, each call checks against whichever
    context is current at that moment.
    """
    if fn is _MISSING:
        return lambda f: guard(name, f, variadic=variadic, context=context)

    current = context or get_context()
    if not current.enabled:
        return fn

    _expect_argument(current, "guard", name, isinstance(name, str), "String", 1)
    _expect_argument(current, "guard", fn, callable(fn), "Function", 2)

    if isinstance(fn, GuardedFunction):
        fn = fn.fn

    params = FIX
    if name.startswith("..."):
        name = name[3:]
        params = VAR
    if variadic or (variadic is None and takes_varargs(fn)):
        params = VAR

    logger.debug("guarding %s (%s)", name, params)
    return GuardedFunction(name, fn, [], params=params, nth_call=0, context=context)


def guard_sum(name: str, fn: Callable, tags: Iterable[str], *,
              context: Optional[GuardContext] = None):
    """Guards the case matcher of a sum type.

    The returned `run(cases)` requires a mapping that names exactly the
    cases in `tags`. A function produced by `fn(cases)` is guarded again
    as ``run<name>``.
    """
    if not (context or get_context()).enabled:
        return fn

    tags = list(tags)
    run_name = f"run{name}"

    def run(cases):
        current = context or get_context()
        if not current.enabled:
            return fn(cases)

        if not isinstance(cases, collections.abc.Mapping):
            raise ArgTypeError(format_message(
                "invalid argument type",
                f"{run_name} expects an argument of type Object",
                "on the 1st call\nin the 1st argument",
                f"but {current.describe(cases)} received"))

        for tag in tags:
            if tag not in cases:
                raise ArgValueError(format_message(
                    "invalid argument value",
                    f"{run_name} expects an Object including the following cases",
                    ", ".join(tags),
                    "on the 1st call\nin the 1st argument",
                    f"but {tag} was not received"))

        extra = [str(k) for k in cases if k not in tags]
        if extra:
            raise ArgValueError(format_message(
                "invalid argument value",
                f"{run_name} expects an Object including the following cases",
                ", ".join(tags),
                "on the 1st call\nin the 1st argument",
                f"but additionally {', '.join(extra)} received"))

        r = fn(cases)
        if _is_continuation(r):
            return guard(run_name, r, context=context)
        return r

    run.__name__ = run_name
    return run
