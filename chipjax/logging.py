"""Console logging for the chipjax emulator.

The module-level :data:`logger` is shared by the emulator core (unknown
opcodes), the :class:`~chipjax.machine.Chip8` wrapper (program loading) and
the command line runner.
"""

import time
import sys

LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

_COLORS = {
    "DEBUG": "\033[36m",
    "INFO": "\033[32m",
    "WARNING": "\033[33m",
    "ERROR": "\033[31m",
}
_RESET = "\033[0m"


class ConsoleLogger:
    """Levelled console logger with elapsed-time stamps, coloured on a TTY."""

    def __init__(self, name: str = "chipjax", log_level: str = "INFO"):
        self.name = name
        self.start_time = time.time()
        self.use_colors = hasattr(sys.stdout, "isatty") and sys.stdout.isatty()
        self.set_level(log_level)

    def set_level(self, log_level: str):
        log_level = log_level.upper()
        if log_level not in LEVELS:
            raise ValueError(f"Unknown log level '{log_level}'. Available: {list(LEVELS)}")
        self.log_level = log_level

    def log(self, level: str, message: str):
        if LEVELS.index(level) < LEVELS.index(self.log_level):
            return
        level_str = f"[{level:>8s}]"
        if self.use_colors:
            level_str = f"{_COLORS[level]}{level_str}{_RESET}"
        print(f"[{time.time() - self.start_time:8.2f}s]{level_str}[{self.name}] {message}", flush=True)

    def debug(self, message: str):
        self.log("DEBUG", message)

    def info(self, message: str):
        self.log("INFO", message)

    def warning(self, message: str):
        self.log("WARNING", message)

    def error(self, message: str):
        self.log("ERROR", message)


logger = ConsoleLogger()


def set_log_level(log_level: str):
    """Set the level of the shared logger."""
    logger.set_level(log_level)
