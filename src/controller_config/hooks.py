"""Notification of config map changes to interested subsystems."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, FrozenSet, Iterable, List, Literal, Mapping, Optional, Tuple

from .history import HistoryEntry
from .objects import ObjectKey

logger = logging.getLogger("controller_config.hooks")
logger.addHandler(logging.NullHandler())


@dataclass(frozen=True)
class ConfigChange:
    """One snapshot replacement: where it came from, what it replaced, what it is now."""

    source: ObjectKey
    previous: Mapping[str, str]
    data: Mapping[str, str]
    entry: HistoryEntry

    def changed_keys(self) -> FrozenSet[str]:
        """Keys added, removed or given a different value by this change."""
        keys = set(self.previous) | set(self.data)
        return frozenset(k for k in keys if self.previous.get(k) != self.data.get(k))


Hook = Callable[[ConfigChange], None]


class HookBus:
    """
    Calls subscribed hooks after each snapshot replacement.

    A hook subscribed with ``keys`` only runs when one of those properties
    changed. ``failure_mode`` decides what a raising hook does: ``raise``
    propagates to the updater, ``log`` records an error and ``ignore`` records
    it at debug level; the remaining hooks still run unless it is ``raise``.
    """

    def __init__(self, failure_mode: Literal["ignore", "log", "raise"] = "log") -> None:
        if failure_mode not in ("ignore", "log", "raise"):
            raise ValueError("failure_mode must be one of 'ignore', 'log', 'raise'")
        self._failure_mode = failure_mode
        self._subscriptions: List[Tuple[Hook, Optional[FrozenSet[str]]]] = []

    def subscribe(self, func: Hook, keys: Optional[Iterable[str]] = None) -> Callable[[], None]:
        """Subscribe ``func``; returns a callable that removes the subscription."""
        if not callable(func):
            raise TypeError("Hook must be callable")
        subscription = (func, frozenset(keys) if keys is not None else None)
        self._subscriptions.append(subscription)

        def _unsubscribe() -> None:
            try:
                self._subscriptions.remove(subscription)
            except ValueError:
                pass

        return _unsubscribe

    def notify(self, change: ConfigChange) -> None:
        changed: Optional[FrozenSet[str]] = None
        for func, keys in list(self._subscriptions):
            if keys is not None:
                if changed is None:
                    changed = change.changed_keys()
                if not keys & changed:
                    continue
            try:
                func(change)
            except Exception as exc:
                if self._failure_mode == "raise":
                    raise
                if self._failure_mode == "log":
                    logger.error("Hook %r failed for change from %s: %s", func, change.source, exc)
                else:
                    logger.debug("Hook %r failed but ignored: %s", func, exc)

    def clear(self) -> None:
        self._subscriptions.clear()
