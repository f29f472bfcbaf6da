"""
Structural type descriptors for arbitrary runtime values.

`describe` turns any value into a short descriptor string such as
``Number``, ``[String]``, ``{String: Number}`` or ``Map<String, [Number]>``.
Guards use descriptors to reject invalid arguments and results, the overload
registry uses them in its diagnostics, and homogeneous containers use them to
pin their element type.
"""
import collections.abc
import math
import numbers
from typing import Any, Dict

# =================================================================
# Markers
# =================================================================

class Symbol:
    """A unique, named marker. Equal only to itself."""
    __slots__ = ("description",)

    def __init__(self, description: str = ""):
        self.description = description

    def __repr__(self) -> str:
        return f"Symbol({self.description})"


# Keys into an object's `meta` dict.
SIG = Symbol("SIG")  # descriptor declared by the object itself
TAG = Symbol("TAG")  # case name of an algebraic value
LOG = Symbol("LOG")  # call log of a guarded continuation


class Null:
    """The unit value. Distinct from None, which marks a missing value."""
    type_tag = "Null"
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "null"

    def __bool__(self) -> bool:
        return False


null = Null()


# =================================================================
# Type tags
# =================================================================

INVALID_TYPES = frozenset({"Undefined", "NaN", "Infinity"})

MAX_TUP_SIZE = 8
MAX_REC_SIZE = 16
MAX_DEPTH = 16

_BUILTIN_TAGS: Dict[type, str] = {
    bool: "Boolean",
    int: "Number",
    float: "Number",
    str: "String",
    list: "Array",
    tuple: "Tuple",
    dict: "Object",
    set: "Set",
    frozenset: "Set",
    type(None): "Undefined",
}


def to_type_tag(x: Any) -> str:
    """Cheap nominal tag of a value, used for overload dispatch."""
    tag = getattr(type(x), "type_tag", None)
    if isinstance(tag, str):
        return tag
    for cls in type(x).__mro__:
        tag = _BUILTIN_TAGS.get(cls)
        if tag is not None:
            # Record-like dicts are keyed by strings only
            if tag == "Object" and not all(isinstance(k, str) for k in x):
                return "Map"
            return tag
    if isinstance(x, collections.abc.Mapping):
        return "Map"
    if isinstance(x, collections.abc.Set):
        return "Set"
    if callable(x):
        return "Function"
    return type(x).__name__


def function_name(f: Any) -> str:
    name = getattr(f, "__name__", "")
    if not isinstance(name, str) or name == "<lambda>":
        return ""
    return name


def is_invalid(descriptor: str) -> bool:
    return descriptor in INVALID_TYPES


def is_homogeneous(descriptor: str) -> bool:
    """False for container descriptors that admit more than one element type.

    For lists the top level between the outer brackets must carry neither a
    positional separator nor the unknown placeholder once nested groups are
    skipped.
    """
    if descriptor in ("Map<?>", "Set<?>", "{?}"):
        return False
    if descriptor.startswith("[") and descriptor.endswith("]"):
        depth = 0
        for ch in descriptor[1:-1]:
            if ch in "[{<":
                depth += 1
            elif ch in "]}>":
                depth -= 1
            elif depth == 0 and ch in "?,":
                return False
    return True


# =================================================================
# Descriptor engine
# =================================================================

class Introspector:
    """Computes descriptors with bounded element counts and nesting depth."""

    def __init__(self,
                 max_tuple_size: int = MAX_TUP_SIZE,
                 max_record_size: int = MAX_REC_SIZE,
                 max_depth: int = MAX_DEPTH):
        self.max_tuple_size = max_tuple_size
        self.max_record_size = max_record_size
        self.max_depth = max_depth
        self._handlers = self._create_handlers()

    def describe(self, x: Any) -> str:
        """Public entry point. Never raises."""
        return self._describe(x, 0, frozenset())

    def _create_handlers(self):
        return {
            "Null": lambda x, depth, path: "Null",
            "Array": self._describe_array,
            "Object": self._describe_object,
            "Map": self._describe_map,
            "Set": self._describe_set,
            "Tuple": self._describe_tuple,
            "Record": self._describe_record,
        }

    def _describe(self, x: Any, depth: int, path: frozenset) -> str:
        if x is None:
            return "Undefined"
        if isinstance(x, bool):
            return "Boolean"
        if isinstance(x, numbers.Real):
            return self._describe_number(x)
        if isinstance(x, str):
            return "String"
        if isinstance(x, Symbol):
            return "Symbol"
        if callable(x):
            return "λ" + function_name(x)

        sig = self._declared_descriptor(x)
        if sig is not None:
            return sig

        tag = to_type_tag(x)
        handler = self._handlers.get(tag)
        if handler is None:
            return tag
        # a container already on the path refers to itself
        if depth >= self.max_depth or id(x) in path:
            return "?"
        return handler(x, depth, path | {id(x)})

    def _declared_descriptor(self, x: Any):
        # describe is total: objects with hostile attribute hooks count as undeclared
        try:
            meta = getattr(x, "meta", None)
            if isinstance(meta, collections.abc.Mapping) and SIG in meta:
                return str(meta[SIG])
        except Exception:
            return None
        return None

    def _describe_number(self, x) -> str:
        if isinstance(x, numbers.Integral):
            return "Number"
        try:
            if math.isnan(x):
                return "NaN"
            if math.isinf(x):
                return "Infinity"
        except OverflowError:
            pass
        return "Number"

    def _describe_array(self, xs, depth: int, path: frozenset) -> str:
        ts = [self._describe(x, depth + 1, path) for x in xs]
        if len(set(ts)) == 1:
            return f"[{ts[0]}]"
        if len(ts) <= self.max_tuple_size:
            return f"[{', '.join(ts)}]"
        return "[?]"

    def _describe_object(self, o, depth: int, path: frozenset) -> str:
        pairs = [(k, self._describe(o[k], depth + 1, path)) for k in o]
        distinct = {t for _, t in pairs}
        if len(distinct) == 1:
            return f"{{String: {pairs[0][1]}}}"
        if len(pairs) <= self.max_record_size:
            return "{" + ", ".join(f"{k}: {t}" for k, t in pairs) + "}"
        return "{?}"

    def _describe_map(self, m, depth: int, path: frozenset) -> str:
        pairs = {f"{self._describe(k, depth + 1, path)}, {self._describe(v, depth + 1, path)}"
                 for k, v in m.items()}
        if len(pairs) == 1:
            return f"Map<{pairs.pop()}>"
        return "Map<?>"

    def _describe_set(self, s, depth: int, path: frozenset) -> str:
        ts = {self._describe(k, depth + 1, path) for k in s}
        if len(ts) == 1:
            return f"Set<{ts.pop()}>"
        return "Set<?>"

    def _describe_tuple(self, xs, depth: int, path: frozenset) -> str:
        if len(xs) > self.max_tuple_size:
            return "Tuple<?>"
        return "Tuple<" + ", ".join(self._describe(x, depth + 1, path) for x in xs) + ">"

    def _describe_record(self, r, depth: int, path: frozenset) -> str:
        if len(r) > self.max_record_size:
            return "Record<?>"
        return "Record<" + ", ".join(
            f"{k}: {self._describe(r[k], depth + 1, path)}" for k in r) + ">"


def describe(x: Any) -> str:
    """Descriptor of `x` under the ceilings of the current guard context."""
    from scriptum.scriptum_runtime import get_context  # runtime imports this module
    return get_context().introspector.describe(x)
