"""
Homogeneous containers.

`wrap_homogeneous` puts a mutable list, mapping or set behind an owning
wrapper that rejects every mutation whose element descriptor differs from the
one fixed when the container was wrapped. Lists additionally refuse
mutations that would leave a gap in their indices. Wrappers report the
type tag of the container they hold, so they describe and dispatch exactly
like it.
"""
import collections.abc
import logging
from typing import Any, Iterator, Optional

from scriptum.scriptum_datatypes import NoCoercion
from scriptum.scriptum_errors import ArgTypeError, IndexGapError
from scriptum.scriptum_introspect import is_homogeneous
from scriptum.scriptum_printer import format_message
from scriptum.scriptum_runtime import GuardContext, get_context

logger = logging.getLogger(__name__)


class HomogeneousContainer(NoCoercion):
    """Common state of the wrappers: the held container and its descriptor.

    An empty container has no descriptor yet; the first insertion pins it.
    """
    type_tag = "Container"

    def __init__(self, data, context: Optional[GuardContext] = None):
        self._data = data
        self._context = context
        self.descriptor: Optional[str] = None
        if len(data):
            descriptor = self.context.describe(self)
            if not is_homogeneous(descriptor):
                raise ArgTypeError(format_message(
                    "invalid argument type",
                    f"wrap_homogeneous expects a homogeneous {self.type_tag}",
                    "on the 1st call\nin the 1st argument",
                    f"but {descriptor} received"))
            self.descriptor = descriptor

    @property
    def context(self) -> GuardContext:
        return self._context or get_context()

    def _coercion_name(self) -> str:
        return self.type_tag

    def _check(self, candidate: str, where: str):
        if not self.context.enabled:
            return
        if self.descriptor is None:
            self.descriptor = candidate
            logger.debug("pinned %s as %s", self.type_tag, candidate)
            return
        if candidate != self.descriptor:
            raise ArgTypeError(format_message(
                "invalid argument type",
                f"{self.type_tag} of type {self.descriptor} only accepts homogeneous elements",
                where,
                f"but {candidate} received"))

    def __len__(self) -> int:
        return len(self._data)

    def __iter__(self) -> Iterator:
        return iter(self._data)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._data!r})"


class HomogeneousList(HomogeneousContainer, collections.abc.MutableSequence):
    type_tag = "Array"

    def _gap(self, index, n: int):
        return IndexGapError(format_message(
            "illegal Array mutation",
            "Array index gaps are not allowed",
            f"but index {index} received for an Array of length {n}"))

    def _index(self, i) -> int:
        if isinstance(i, slice):
            raise self._gap(i, len(self._data))
        return i + len(self._data) if i < 0 else i

    def __getitem__(self, i):
        return self._data[i]

    def __setitem__(self, i, value):
        if not self.context.enabled:
            self._data[i] = value
            return
        n = len(self._data)
        i = self._index(i)
        if i < 0:
            raise IndexError("list assignment index out of range")
        if i > n:
            raise self._gap(i, n)
        self._check(f"[{self.context.describe(value)}]", f"at index {i}")
        if i >= n:
            self._data.append(value)
        else:
            self._data[i] = value

    def __delitem__(self, i):
        if not self.context.enabled:
            del self._data[i]
            return
        n = len(self._data)
        i = self._index(i)
        if not 0 <= i < n:
            raise IndexError("list index out of range")
        if i != n - 1:
            raise self._gap(i, n)
        del self._data[i]

    def insert(self, i, value):
        self._check(f"[{self.context.describe(value)}]", f"at index {i}")
        self._data.insert(i, value)

    def __eq__(self, other):
        if isinstance(other, HomogeneousList):
            other = other._data
        return self._data == other

    __hash__ = None


class HomogeneousMap(HomogeneousContainer, collections.abc.MutableMapping):
    type_tag = "Map"

    def __getitem__(self, key):
        return self._data[key]

    def __setitem__(self, key, value):
        describe = self.context.describe
        self._check(f"Map<{describe(key)}, {describe(value)}>", f"at key {key!r}")
        self._data[key] = value

    def __delitem__(self, key):
        del self._data[key]


class HomogeneousSet(HomogeneousContainer, collections.abc.MutableSet):
    type_tag = "Set"

    @classmethod
    def _from_iterable(cls, it):
        # set algebra yields plain sets
        return set(it)

    def __contains__(self, value) -> bool:
        return value in self._data

    def add(self, value):
        self._check(f"Set<{self.context.describe(value)}>", "in the added element")
        self._data.add(value)

    def discard(self, value):
        self._data.discard(value)


def wrap_homogeneous(container: Any, context: Optional[GuardContext] = None):
    """Wraps a mutable list, mapping or set so that it stays homogeneous.

    Returns `container` unchanged when the context is not guarded.
    """
    current = context or get_context()
    if not current.enabled or isinstance(container, HomogeneousContainer):
        return container

    if isinstance(container, collections.abc.MutableSequence):
        cls = HomogeneousList
    elif isinstance(container, collections.abc.MutableMapping):
        cls = HomogeneousMap
    elif isinstance(container, collections.abc.MutableSet):
        cls = HomogeneousSet
    else:
        raise ArgTypeError(format_message(
            "invalid argument type",
            "wrap_homogeneous expects a mutable Array, Map or Set",
            "on the 1st call\nin the 1st argument",
            f"but {current.describe(container)} received"))

    wrapped = cls(container, context)
    logger.debug("wrapped %s as %s", type(container).__name__, wrapped.descriptor)
    return wrapped
