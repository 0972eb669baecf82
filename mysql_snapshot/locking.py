"""
Read lock over the selected tables and views for the duration of a backup.
"""

import logging

from .connection import DatabaseConnection


class ConsistencyLock:
    """Holds a READ lock on every selected object while the script is written.

    Use as a context manager: UNLOCK TABLES runs exactly once on exit, whether
    the body finished or raised.
    """

    def __init__(self, connection: DatabaseConnection, object_names: list[str]):
        self.connection = connection
        self.object_names = list(object_names)
        self.locked = False

    def __enter__(self) -> "ConsistencyLock":
        self.lock()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.unlock()

    def lock(self) -> None:
        """Acquire the READ lock. Failure propagates and aborts the run."""
        if self.object_names:
            self.connection.lock_tables(self.object_names)
            logging.info(f"Locked {len(self.object_names)} table(s)/view(s) for reading")
        else:
            logging.debug("No tables or views selected, nothing to lock")
        self.locked = True

    def unlock(self) -> None:
        """Release the lock taken by lock()."""
        if not self.locked:
            return
        self.locked = False
        self.connection.unlock_tables()
        logging.debug("Tables unlocked")
