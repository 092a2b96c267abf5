"""Logging and event recording for a Kubegres resource."""

from __future__ import annotations

import enum
import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from itertools import zip_longest
from typing import Any, Protocol

__all__ = ["EventType", "EventRecorder", "LogWrapper", "interfaces_to_str"]


class EventType(str, enum.Enum):
    NORMAL = "Normal"
    WARNING = "Warning"


class EventRecorder(Protocol):
    def event(self, obj: Any, event_type: EventType, reason: str, message: str) -> None: ...


def _format_value(value: Any) -> str:
    if value is None:
        return "<nil>"
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _pairs_to_str(keys_and_values: Any) -> str:
    if isinstance(keys_and_values, (str, bytes)) or not isinstance(keys_and_values, Sequence):
        return ""
    items = list(keys_and_values)
    return ", ".join(
        f"'{key}': {_format_value(value)}"
        for key, value in zip_longest(items[0::2], items[1::2])
    )


def interfaces_to_str(*args: Any) -> str:
    """Render sequences of alternating keys and values as "'key': value" pairs."""
    if not args or (len(args) == 1 and args[0] is None):
        return ""
    return ", ".join(_pairs_to_str(arg) for arg in args)


@dataclass
class LogWrapper:
    """Logs messages and records them as events on the Kubegres resource."""

    kubegres: Any
    logger: logging.Logger
    recorder: EventRecorder
    _values: list[Any] = field(default_factory=list, init=False, repr=False)

    def with_values(self, *args: Any) -> None:
        self._values.extend(args)

    def with_name(self, name: str) -> None:
        self.logger = self.logger.getChild(name)

    def _log(self, level: int, msg: str, args: Sequence[Any]) -> None:
        text = msg
        pairs = interfaces_to_str([*self._values, *args])
        if pairs:
            text = f"{msg} {pairs}"
        self.logger.log(level, "%s", text)

    def info(self, msg: str, *args: Any) -> None:
        self._log(logging.INFO, msg, args)

    def error(self, err: BaseException, msg: str, *args: Any) -> None:
        self._log(logging.ERROR, msg, [*args, "error", err])

    def warning(self, msg: str, *args: Any) -> None:
        self._log(logging.INFO, "Warning: " + msg, args)

    def info_event(self, event_reason: str, msg: str, *args: Any) -> None:
        self.info(msg, *args)
        self.recorder.event(
            self.kubegres, EventType.NORMAL, event_reason, self._full_msg(msg, args)
        )

    def error_event(self, event_reason: str, err: BaseException, msg: str, *args: Any) -> None:
        self.error(err, msg, *args)
        self.recorder.event(
            self.kubegres, EventType.WARNING, event_reason, self._full_err_msg(err, msg, args)
        )

    def warning_event(self, event_reason: str, msg: str, *args: Any) -> None:
        self.warning(msg, *args)
        self.recorder.event(
            self.kubegres, EventType.WARNING, event_reason, self._full_msg(msg, args)
        )

    @staticmethod
    def _full_msg(msg: str, args: Sequence[Any]) -> str:
        if not msg:
            return ""
        pairs = interfaces_to_str(list(args))
        return f"{msg} {pairs}" if pairs else msg

    def _full_err_msg(self, err: BaseException, msg: str, args: Sequence[Any]) -> str:
        result = ""
        separator = ""
        custom = self._full_msg(msg, args)
        if custom:
            result = custom
            separator = " - "
        err_text = str(err)
        if err_text:
            result += separator + err_text
        return result