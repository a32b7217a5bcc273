"""Cooperative cancellation of training runs."""

import signal
import threading
from typing import Any


class CancellationToken:
    """Flag set from outside a training run and polled once per epoch.

    Backed by a threading.Event, so a cancel() issued from another thread or a
    signal handler is visible to the trainer's next check.
    """

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        """Requests the run to stop before its next epoch."""
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def install_signal_handler(self, signum: int = signal.SIGINT) -> Any:
        """
        Makes the signal 'signum' (Ctrl-C by default) cancel this token.

        Must be called from the main thread.

        :param signum: int: Signal number. Defaults to SIGINT.
        :return: The previously installed handler.
        """

        def _handler(_signum: int, _frame: Any) -> None:
            self.cancel()

        return signal.signal(signum, _handler)
