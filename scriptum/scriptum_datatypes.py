"""
Disciplined value types for the scriptum runtime.

This module provides nominal wrappers around primitives (`All`, `Any`,
`Char`, `Float`, `Int`, `Sum`, `Product`), a frozen record (`Rec`), and the
two declarators for algebraic data types (`Type` for sum types, `Data` for
single-constructor types). None of these values may be silently converted
to a primitive: `str()`, `int()`, `float()`, formatting and friends raise
TypeCoercionError. Constructors validate their payload only while the
current guard context is enabled.
"""
import collections.abc
import numbers
from types import MappingProxyType
from typing import Dict, Iterator, Mapping, Optional

from scriptum.scriptum_errors import ArgTypeError, ArgValueError, ArityError, TypeCoercionError
from scriptum.scriptum_guard import guard, guard_sum, required_params
from scriptum.scriptum_introspect import SIG, TAG
from scriptum.scriptum_printer import capitalize, format_message, ordinal, stringify
from scriptum.scriptum_runtime import GuardContext, get_context


def _is_number(v) -> bool:
    return isinstance(v, numbers.Real) and not isinstance(v, bool)


def _arg_type_error(context: GuardContext, owner: str, expected: str, value,
                    call: int = 1, position: int = 1) -> ArgTypeError:
    return ArgTypeError(format_message(
        "invalid argument type",
        f"{owner} expects an argument of type {expected}",
        f"on the {ordinal(call)} call\nin the {ordinal(position)} argument",
        f"but {context.describe(value)} received"))


def _arg_value_error(owner: str, expected: str, value,
                     call: int = 1, position: int = 1) -> ArgValueError:
    return ArgValueError(format_message(
        "invalid argument value",
        f"{owner} expects {expected}",
        f"on the {ordinal(call)} call\nin the {ordinal(position)} argument",
        f"but {stringify(value)} received"))


# =================================================================
# Coercion discipline
# =================================================================

class NoCoercion:
    """Mixin that turns every implicit primitive conversion into an error."""

    def _coercion_name(self) -> str:
        return type(self).__name__

    def _forbid(self, hint: str):
        raise TypeCoercionError(format_message(
            "illegal type coercion",
            f"{self._coercion_name()} must maintain its type",
            f"but type coercion to {capitalize(hint)} received"))

    def __str__(self):
        self._forbid("string")

    def __format__(self, format_spec):
        self._forbid("string")

    def __bytes__(self):
        self._forbid("bytes")

    def __int__(self):
        self._forbid("number")

    def __float__(self):
        self._forbid("number")

    def __complex__(self):
        self._forbid("number")

    def __index__(self):
        self._forbid("number")


# =================================================================
# Boxed primitives
# =================================================================

class Boxed(NoCoercion):
    """A primitive payload under a nominal type."""
    type_tag = "Boxed"
    expects = "Number"
    __slots__ = ("value",)

    def __init__(self, value):
        context = get_context()
        if context.enabled:
            self._validate(value, context)
        object.__setattr__(self, "value", value)

    def _validate(self, value, context: GuardContext):
        if not _is_number(value):
            raise _arg_type_error(context, type(self).__name__, self.expects, value)

    def __setattr__(self, key, value):
        raise TypeError(f"{type(self).__name__} is immutable")

    def __delattr__(self, key):
        raise TypeError(f"{type(self).__name__} is immutable")

    def __eq__(self, other):
        if type(other) is not type(self):
            return NotImplemented
        return self.value == other.value

    def __hash__(self):
        return hash((type(self).__name__, self.value))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.value!r})"


class All(Boxed):
    """Boolean monoid under conjunction."""
    type_tag = "All"
    expects = "Boolean"
    __slots__ = ()

    def _validate(self, value, context):
        if not isinstance(value, bool):
            raise _arg_type_error(context, "All", self.expects, value)


class Any(Boxed):
    """Boolean monoid under disjunction."""
    type_tag = "Any"
    expects = "Boolean"
    __slots__ = ()

    def _validate(self, value, context):
        if not isinstance(value, bool):
            raise _arg_type_error(context, "Any", self.expects, value)


class Char(Boxed):
    """A single character."""
    type_tag = "Char"
    expects = "String"
    __slots__ = ()

    def _validate(self, value, context):
        if not isinstance(value, str):
            raise _arg_type_error(context, "Char", self.expects, value)
        if len(value) != 1:
            raise _arg_value_error("Char", "a single character", value)


class Float(Boxed):
    type_tag = "Float"
    __slots__ = ()


class Int(Boxed):
    type_tag = "Integer"
    __slots__ = ()

    def _validate(self, value, context):
        super()._validate(value, context)
        if value % 1 != 0:
            raise _arg_value_error("Int", "an integral Number", value)


class Sum(Boxed):
    """Number monoid under addition."""
    type_tag = "Sum"
    __slots__ = ()


class Product(Boxed):
    """Number monoid under multiplication."""
    type_tag = "Product"
    __slots__ = ()


# =================================================================
# Records
# =================================================================

class Rec(NoCoercion, collections.abc.Mapping):
    """A frozen record. Supports the read-only mapping protocol.

    Fields can be read as attributes but never set or deleted.
    """
    type_tag = "Record"

    def __init__(self, fields: Optional[Mapping[str, object]] = None, **kwargs):
        context = get_context()
        if fields is None:
            fields = {}
        if context.enabled and not isinstance(fields, collections.abc.Mapping):
            raise _arg_type_error(context, "Rec", "Object", fields)
        object.__setattr__(self, "_fields", MappingProxyType(dict(fields, **kwargs)))

    def __getitem__(self, key):
        return self._fields[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._fields)

    def __len__(self) -> int:
        return len(self._fields)

    def __getattr__(self, key: str):
        fields = self.__dict__.get("_fields", {})
        if key in fields:
            return fields[key]
        raise AttributeError(key)

    def __setattr__(self, key, value):
        raise TypeError(f"Rec is frozen, cannot set {key!r}")

    def __delattr__(self, key):
        raise TypeError(f"Rec is frozen, cannot delete {key!r}")

    def __hash__(self):
        return hash(tuple(self._fields.items()))

    def __repr__(self) -> str:
        return f"Rec({dict(self._fields)!r})"


# =================================================================
# Algebraic data types
# =================================================================

class Variant:
    """A value built by a `Type` or `Data` declarator.

    `run` matches on the value: for sum types it takes a mapping from every
    case name to its handler, for single-constructor types a continuation.
    """

    def __init__(self, tag: str, run, sig: str):
        self.meta: Dict[object, object] = {TAG: tag, SIG: sig}
        self.run = run

    @property
    def tag(self) -> str:
        return self.meta[TAG]

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.tag}>"


def _check_type_names(context: GuardContext, owner: str, names):
    for n, arg in enumerate(names):
        if not isinstance(arg, str):
            raise _arg_type_error(context, owner, "String", arg, position=n + 1)
        if not arg[:1].isupper():
            raise _arg_value_error(owner, "a capitalized String", arg, position=n + 1)


def _check_unary(context: GuardContext, owner: str, fn, call: int):
    if not callable(fn):
        raise _arg_type_error(context, owner, "Function", fn, call=call)
    params = required_params(fn)
    if params is not None and len(params) != 1:
        raise ArityError(format_message(
            "invalid function call arity",
            f"{owner} expects an 1-ary Function",
            f"on the {ordinal(call)} call\nin the 1st argument",
            f"but {len(params)}-ary Function received"))


def Type(name: str, *tags: str):
    """Declares a sum type with the case names `tags`.

    ``Type(name, *tags)(tag)(dcons)`` builds a value of case `tag`; `dcons`
    receives the mapping of case handlers and picks its own.
    """
    context = get_context()
    if context.enabled:
        _check_type_names(context, "Type", (name,) + tags)

    cls = type(name, (Variant,), {"type_tag": name})

    def select(tag: str):
        context = get_context()
        if context.enabled:
            if not isinstance(tag, str):
                raise _arg_type_error(context, name, "String", tag, call=2)
            if tag not in tags:
                raise _arg_value_error(name, "a known tag", tag, call=2)

        def construct(dcons):
            context = get_context()
            if context.enabled:
                _check_unary(context, name, dcons, call=3)
            return cls(tag, guard_sum(name, dcons, tags), f"{name}<λ>")

        construct.__name__ = tag
        return construct

    select.__name__ = name
    select.tags = tags
    return select


def Data(name: str):
    """Declares a single-constructor type.

    ``Data(name)(dcons)`` returns the guarded constructor ``dcons(make)``,
    where ``make(k)`` wraps the continuation `k` into a value whose `run`
    applies it.
    """
    context = get_context()
    if context.enabled:
        _check_type_names(context, "Data", (name,))

    cls = type(name, (Variant,), {"type_tag": name})

    def make(k):
        context = get_context()
        if context.enabled and not callable(k):
            raise _arg_type_error(context, name, "Function", k, call=3)
        return cls(name, guard(f"run{name}", k), f"{name}<λ>")

    make.__name__ = name

    def declare(dcons):
        context = get_context()
        if context.enabled:
            _check_unary(context, name, dcons, call=2)
        return guard(name, dcons(make))

    declare.__name__ = name
    return declare
