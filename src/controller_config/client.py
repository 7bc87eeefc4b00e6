from __future__ import annotations

import logging
import threading
from concurrent.futures import Future
from concurrent.futures import TimeoutError as FutureTimeoutError
from typing import Any, Callable, Optional, Protocol, TypeVar

from typing_extensions import runtime_checkable

from .exceptions import DeadlineExceededError

logger = logging.getLogger("controller_config.client")
logger.addHandler(logging.NullHandler())

T = TypeVar("T")


@runtime_checkable
class ObjectClient(Protocol):
    """Object store access. ``get`` raises ObjectNotFoundError on a miss.

    ``create`` and ``update`` return the object as stored, including any
    fields the platform assigned on admission.
    """

    def get(self, kind: str, namespace: str, name: str) -> Any: ...

    def create(self, obj: Any) -> Any: ...

    def update(self, obj: Any) -> Any: ...

    def delete(self, obj: Any) -> None: ...


def call_with_deadline(func: Callable[..., T], *args: Any, timeout: Optional[float]) -> T:
    """
    Run ``func(*args)`` and wait at most ``timeout`` seconds for it.

    The call runs on a daemon thread; on expiry the caller stops waiting and
    DeadlineExceededError is raised. The abandoned call keeps running and its
    future is attached to the error as ``pending``. A timeout of None calls
    ``func`` inline.
    """
    if timeout is None:
        return func(*args)

    future: Future[T] = Future()

    def _run() -> None:
        if not future.set_running_or_notify_cancel():
            return
        try:
            future.set_result(func(*args))
        except BaseException as exc:
            future.set_exception(exc)

    name = getattr(func, "__name__", "call")
    t = threading.Thread(target=_run, name=f"controller-config-{name}", daemon=True)
    t.start()
    try:
        return future.result(timeout)
    except FutureTimeoutError:
        logger.error("Object store call %s did not complete within %ss", name, timeout)
        raise DeadlineExceededError(
            f"{name} did not complete within {timeout}s", pending=future
        ) from None


class DeadlineClient:
    """Wraps an ObjectClient so that every call is bounded by ``timeout`` seconds."""

    def __init__(self, client: ObjectClient, timeout: Optional[float]) -> None:
        if timeout is not None and timeout <= 0:
            raise ValueError("timeout must be positive or None")
        self._client = client
        self._timeout = timeout

    @property
    def timeout(self) -> Optional[float]:
        return self._timeout

    def get(self, kind: str, namespace: str, name: str) -> Any:
        return call_with_deadline(self._client.get, kind, namespace, name, timeout=self._timeout)

    def create(self, obj: Any) -> Any:
        return call_with_deadline(self._client.create, obj, timeout=self._timeout)

    def update(self, obj: Any) -> Any:
        return call_with_deadline(self._client.update, obj, timeout=self._timeout)

    def delete(self, obj: Any) -> None:
        call_with_deadline(self._client.delete, obj, timeout=self._timeout)
