import threading

from skillshelf.errors import ImportCancelledError


class CancelToken:
    """Caller-owned flag checked between the steps of a long operation."""

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise ImportCancelledError()


def check_cancelled(token: "CancelToken | None") -> None:
    if token is not None:
        token.raise_if_cancelled()
