# scriptum runtime state

import collections
import logging
import sys
from typing import Iterator, List, Optional

from scriptum.scriptum_config import GuardConfig, load_config
from scriptum.scriptum_introspect import Introspector

logger = logging.getLogger(__name__)

_PACKAGE_LOGGER = "scriptum"


# ===================================================================
# 1. Call history
# ===================================================================


class CallHistory:
    """Bounded, most-recent-first log of completed guarded calls.

    The history exists only to annotate errors with recent call context.
    Once full, every new entry evicts the oldest one.
    """

    def __init__(self, capacity: int = 10):
        if capacity < 0:
            raise ValueError(f"history capacity must not be negative, got {capacity}")
        self.capacity = capacity
        self._entries: collections.deque = collections.deque(maxlen=capacity)

    def record(self, entry: str):
        self._entries.appendleft(entry)

    def recent(self, n: Optional[int] = None) -> List[str]:
        """Newest entries first, at most `n` of them."""
        entries = list(self._entries)
        return entries if n is None else entries[:n]

    def clear(self):
        self._entries.clear()

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._entries))

    def __len__(self) -> int:
        return len(self._entries)

    def __getitem__(self, index):
        return list(self._entries)[index]

    def __repr__(self) -> str:
        return f"<CallHistory {len(self)}/{self.capacity}>"


# ===================================================================
# 2. Guard context
# ===================================================================


class GuardContext:
    """Process-scoped state shared by guards, overloads and containers.

    A context owns the global toggle, the descriptor ceilings and the call
    history. Guards capture the context they were created under, so separate
    contexts never see each other's history.
    """

    def __init__(self, config: Optional[GuardConfig] = None):
        self.config = config or GuardConfig()
        self.enabled: bool = self.config.guarded
        self.history = CallHistory(self.config.history_size)
        self.introspector = Introspector(
            max_tuple_size=self.config.max_tuple_size,
            max_record_size=self.config.max_record_size,
            max_depth=self.config.max_depth,
        )

    def describe(self, x) -> str:
        return self.introspector.describe(x)

    def record_call(self, entry: str):
        self.history.record(entry)
        logger.debug("completed %s", entry)

    def recent_calls(self) -> List[str]:
        return self.history.recent(self.config.error_history_depth)

    def guard(self, name, *args, **kwargs):
        from scriptum.scriptum_guard import guard
        return guard(name, *args, context=self, **kwargs)

    def __repr__(self) -> str:
        state = "guarded" if self.enabled else "passthrough"
        return f"<GuardContext {state} history={len(self.history)}/{self.history.capacity}>"


_context: Optional[GuardContext] = None


def get_context() -> GuardContext:
    """Returns the process-wide default context, creating it on first use."""
    global _context
    if _context is None:
        _context = GuardContext(load_config())
        configure_logging(_context.config.debug)
    return _context


def set_context(context: GuardContext) -> GuardContext:
    """Installs `context` as the default and returns the previous one."""
    global _context
    previous = get_context()
    _context = context
    return previous


def set_guarded(flag: bool):
    """Global toggle: when off, every guard of the default context is a passthrough."""
    get_context().enabled = bool(flag)
    logger.debug("guarding %s", "enabled" if flag else "disabled")


def is_guarded() -> bool:
    return get_context().enabled


# ===================================================================
# 3. Logging
# ===================================================================


def configure_logging(debug: bool = False):
    """Routes scriptum debug records to stderr when debugging is requested."""
    pkg_logger = logging.getLogger(_PACKAGE_LOGGER)
    if not pkg_logger.handlers:
        pkg_logger.addHandler(logging.NullHandler())
    if debug:
        if not any(getattr(h, "_scriptum_debug", False) for h in pkg_logger.handlers):
            handler = logging.StreamHandler(sys.stderr)
            handler.setFormatter(logging.Formatter("[DBG] %(name)s: %(message)s"))
            handler._scriptum_debug = True
            pkg_logger.addHandler(handler)
        pkg_logger.setLevel(logging.DEBUG)
