"""
Formatting helpers for scriptum diagnostics.

Error messages are meant for a human reading a traceback, so everything here
produces plain multi-line text: ordinals for call and argument positions,
short value renderings, and the assembly of message paragraphs together with
the curried call log and the most recent call history entries.
"""
import collections.abc
from typing import Iterable, Optional, Sequence


def ordinal(n: int) -> str:
    """1 -> '1st', 2 -> '2nd', 11 -> '11th', 23 -> '23rd'."""
    v = n % 100
    if 10 < v < 14:
        return f"{n}th"
    return f"{n}" + {1: "st", 2: "nd", 3: "rd"}.get(v % 10, "th")


def capitalize(s: str) -> str:
    return s[:1].upper() + s[1:]


class Printer:
    """Renders runtime values inside diagnostic messages."""

    def __init__(self, max_items: int = 8):
        self.max_items = max_items
        self._handlers = self._create_handlers()

    def pformat(self, obj) -> str:
        """Public entry point to format a value."""
        handler = self._get_handler(obj)
        return handler(obj)

    def _get_handler(self, obj):
        obj_type = type(obj)
        if obj_type in self._handlers:
            return self._handlers[obj_type]
        if isinstance(obj, str):
            return self._pformat_str
        if isinstance(obj, collections.abc.Mapping):
            return self._pformat_mapping
        if isinstance(obj, (list, tuple)):
            return self._pformat_sequence
        return self._pformat_repr

    def _create_handlers(self):
        return {
            str: self._pformat_str,
            int: self._pformat_primitive,
            float: self._pformat_primitive,
            bool: self._pformat_primitive,
            type(None): self._pformat_primitive,
            list: self._pformat_sequence,
            tuple: self._pformat_sequence,
            dict: self._pformat_mapping,
        }

    def _pformat_primitive(self, obj):
        return str(obj)

    def _pformat_str(self, obj):
        return f'"{obj}"'

    def _pformat_repr(self, obj):
        try:
            return repr(obj)
        except Exception:
            return f"<{type(obj).__name__}>"

    def _pformat_sequence(self, obj):
        items = [self.pformat(x) for x in list(obj)[:self.max_items]]
        if len(obj) > self.max_items:
            items.append("...")
        if isinstance(obj, tuple):
            return f"({', '.join(items)})"
        return f"[{', '.join(items)}]"

    def _pformat_mapping(self, obj):
        pairs = []
        for i, (k, v) in enumerate(obj.items()):
            if i == self.max_items:
                pairs.append("...")
                break
            pairs.append(f"{self.pformat(k)}: {self.pformat(v)}")
        return "{" + ", ".join(pairs) + "}"


def stringify(x) -> str:
    return Printer().pformat(x)


def format_call_log(log: Sequence[str]) -> str:
    return "[" + ", ".join(log) + "]"


def format_message(headline: str,
                   *paragraphs: str,
                   log: Optional[Sequence[str]] = None,
                   recent: Optional[Iterable[str]] = None) -> str:
    """Joins message paragraphs with blank lines, appending the call log and
    recent call history when they carry anything."""
    parts = [headline]
    parts.extend(p for p in paragraphs if p)
    if log:
        parts.append("CALL LOG:\n\n" + format_call_log(log))
    recent = list(recent or [])
    if recent:
        parts.append("RECENT CALLS:\n\n" + "\n".join(recent))
    return "\n\n".join(parts) + "\n"


__all__ = [
    "ordinal",
    "capitalize",
    "Printer",
    "stringify",
    "format_call_log",
    "format_message",
]
