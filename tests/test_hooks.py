import datetime
import logging

import pytest

from controller_config.history import HistoryEntry
from controller_config.hooks import ConfigChange, HookBus
from controller_config.objects import ObjectKey


def _change(previous=None, data=None):
    return ConfigChange(
        source=ObjectKey("ns", "cm"),
        previous=previous or {},
        data=data or {},
        entry=HistoryEntry(
            timestamp=datetime.datetime.now(tz=datetime.timezone.utc),
            namespace="ns",
            name="cm",
            resource_version="1",
            keys=tuple(sorted(data or {})),
        ),
    )


def test_changed_keys_covers_added_removed_and_modified():
    change = _change({"same": "1", "gone": "x", "mod": "a"}, {"same": "1", "mod": "b", "new": ""})
    assert change.changed_keys() == {"gone", "mod", "new"}


def test_hookbus_subscribe_and_notify():
    bus = HookBus()
    called = []
    bus.subscribe(called.append)
    change = _change(data={"a": "1"})
    bus.notify(change)
    assert called == [change]


def test_hookbus_key_filter():
    bus = HookBus()
    called = []
    bus.subscribe(called.append, keys=["watched"])
    bus.notify(_change({"other": "1"}, {"other": "2"}))
    assert called == []
    bus.notify(_change({"watched": "1"}, {}))
    assert len(called) == 1


def test_hookbus_unsubscribe_is_idempotent():
    bus = HookBus()
    called = []
    unsubscribe = bus.subscribe(called.append)
    unsubscribe()
    unsubscribe()
    bus.notify(_change())
    assert called == []


def test_hookbus_subscribe_non_callable_raises():
    bus = HookBus()
    with pytest.raises(TypeError):
        bus.subscribe(123)  # type: ignore[arg-type]


def test_hookbus_invalid_failure_mode():
    with pytest.raises(ValueError):
        HookBus("boom")  # type: ignore[arg-type]


def test_hookbus_failure_modes(caplog):
    def bad(_):
        raise RuntimeError("fail")

    caplog.set_level(logging.DEBUG, logger="controller_config.hooks")
    after = []

    bus_ignore = HookBus("ignore")
    bus_ignore.subscribe(bad)
    bus_ignore.subscribe(after.append)
    bus_ignore.notify(_change())
    assert len(after) == 1

    bus_log = HookBus("log")
    bus_log.subscribe(bad)
    bus_log.notify(_change())
    assert any(r.levelno == logging.ERROR and "ns/cm" in r.getMessage() for r in caplog.records)

    bus_raise = HookBus("raise")
    bus_raise.subscribe(bad)
    with pytest.raises(RuntimeError):
        bus_raise.notify(_change())


def test_hookbus_clear():
    bus = HookBus()
    called = []
    bus.subscribe(called.append)
    bus.clear()
    bus.notify(_change())
    assert called == []
