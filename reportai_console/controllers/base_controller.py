"""
Base controller class for the console's state containers.
"""

from abc import ABC, abstractmethod
import logging
import threading
from contextlib import contextmanager

class BaseController(ABC):
    """Shared logging, locking and in-flight bookkeeping."""

    def __init__(self, name: str):
        self.name = name
        self.logger = logging.getLogger(name)
        self._lock = threading.RLock()
        self._in_flight = 0
        self._closed = False

    def close(self):
        """Stop applying responses; the owning view is gone."""
        with self._lock:
            self._closed = True
        self.log_step("Closed, late responses will be dropped")

    @contextmanager
    def _tracking(self):
        """Hold the loading flag for the duration of one call."""
        with self._lock:
            self._in_flight += 1
            self._set_loading(True)
        try:
            yield
        finally:
            with self._lock:
                self._in_flight -= 1
                self._set_loading(self._in_flight > 0)

    @abstractmethod
    def _set_loading(self, loading: bool):
        """Publish the loading flag to the owned state."""
        pass

    def log_step(self, message: str):
        """Log execution step."""
        self.logger.info(f"[{self.name}] {message}")

    def log_error(self, message: str):
        """Log error."""
        self.logger.error(f"[{self.name}] {message}")
