"""Log severity levels."""

from enum import IntEnum


class Level(IntEnum):
    DEBUG = -1
    INFO = 0
    WARN = 1
    ERROR = 2
    PANIC = 4
    FATAL = 5

    def __str__(self) -> str:
        return self.name.lower()
