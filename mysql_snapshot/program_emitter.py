"""
DROP/CREATE blocks for stored procedures, functions and triggers.
"""

import logging

from .connection import DatabaseConnection, quote_identifier
from .models import RoutineKind, TriggerInfo
from .output import OutputSink


class ProgramEmitter:
    """Writes stored programs and triggers wrapped in DELIMITER blocks.

    Program bodies contain ';' themselves, so each block switches the client
    delimiter to '$$' and back.
    """

    DELIMITER = '$$'

    def __init__(self, connection: DatabaseConnection, sink: OutputSink, database: str):
        self.connection = connection
        self.sink = sink
        self.database = database

    def _write_block(self, lines: list[str]) -> None:
        block = [f"DELIMITER {self.DELIMITER}", *lines, "DELIMITER ;"]
        self.sink.append("\n".join(block) + "\n\n")

    def write_routines(self, kind: RoutineKind) -> int:
        """Write every procedure or function of the database.

        Returns:
            Number of routines written.
        """
        written = 0
        for name in self.connection.get_routine_names(kind, self.database):
            create_sql = self.connection.get_create_routine(kind, self.database, name)
            if create_sql is None:
                logging.warning(
                    f"Skipping {kind.value.lower()} '{name}': definition not visible to this user"
                )
                continue
            self._write_block([
                f"DROP {kind.value} IF EXISTS {quote_identifier(name)}{self.DELIMITER}",
                f"{create_sql}{self.DELIMITER}",
            ])
            written += 1
        logging.debug(f"Wrote {written} {kind.value.lower()}(s)")
        return written

    def write_trigger(self, trigger: TriggerInfo) -> None:
        name = quote_identifier(trigger.name)
        self._write_block([
            f"DROP TRIGGER IF EXISTS {name}{self.DELIMITER}",
            f"CREATE TRIGGER {name} {trigger.timing} {trigger.event} "
            f"ON {quote_identifier(trigger.table)} FOR EACH ROW",
            f"{trigger.statement}{self.DELIMITER}",
        ])

    def write_triggers(self) -> int:
        triggers = self.connection.get_triggers(self.database)
        for trigger in triggers:
            self.write_trigger(trigger)
        return len(triggers)
