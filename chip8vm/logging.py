"""Console logging utilities for running the emulator.

This module provides a small logging system with callbacks so the run loop can
report progress, faults and per-instruction traces without knowing where the
output goes. Headless runs get a tqdm progress bar.
"""

import sys
import time
from typing import Any, Dict, List, Optional

from tqdm import tqdm


class ConsoleLogger:
    """Flexible console logger with level filtering, colors and timestamps."""

    def __init__(
        self,
        name: str = "chip8vm",
        log_level: str = "INFO",
        use_colors: bool = True,
        show_timestamps: bool = True,
        stream=None,
    ):
        self.name = name
        self.log_level = log_level.upper()
        self.stream = stream if stream is not None else sys.stdout
        self.use_colors = (
            use_colors and hasattr(self.stream, "isatty") and self.stream.isatty()
        )
        self.show_timestamps = show_timestamps
        self.start_time = time.time()

        self.colors = (
            {
                "DEBUG": "\033[36m",
                "INFO": "\033[32m",
                "WARNING": "\033[33m",
                "ERROR": "\033[31m",
                "CRITICAL": "\033[35m",
                "RESET": "\033[0m"
            }
            if self.use_colors
            else {
                k: ""
                for k in ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL", "RESET"]
            }
        )

        self.level_order = {
            "DEBUG": 0,
            "INFO": 1,
            "WARNING": 2,
            "ERROR": 3,
            "CRITICAL": 4,
        }

    def _should_log(self, level: str) -> bool:
        """Check if message should be logged based on current log level."""
        return self.level_order.get(level.upper(), 1) >= self.level_order.get(
            self.log_level, 1
        )

    def is_enabled_for(self, level: str) -> bool:
        return self._should_log(level)

    def _format_message(self, level: str, message: str) -> str:
        """Format log message with timestamp, level, and colors."""
        timestamp = (
            f"[{time.time() - self.start_time:8.2f}s]" if self.show_timestamps else ""
        )
        level_str = f"[{level:>8s}]"
        name_str = f"[{self.name}]"

        if self.use_colors:
            color = self.colors.get(level.upper(), "")
            reset = self.colors["RESET"]
            level_str = f"{color}{level_str}{reset}"

        return f"{timestamp}{level_str}{name_str} {message}"

    def log(self, level: str, message: str):
        """Log a message at the specified level."""
        if self._should_log(level):
            formatted = self._format_message(level, message)
            print(formatted, file=self.stream, flush=True)

    def debug(self, message: str):
        self.log("DEBUG", message)

    def info(self, message: str):
        self.log("INFO", message)

    def warning(self, message: str):
        self.log("WARNING", message)

    def error(self, message: str):
        self.log("ERROR", message)

    def critical(self, message: str):
        self.log("CRITICAL", message)


class EmulatorLogger(ConsoleLogger):
    """Logger for run loops: start banner, fault reports and run summaries."""

    def __init__(self, name: str = "chip8vm", **kwargs):
        super().__init__(name, **kwargs)
        self.run_start_time = time.time()

    def log_run_start(self, config: Dict[str, Any]):
        """Log run configuration and start message."""
        self.run_start_time = time.time()
        self.info("=" * 60)
        self.info("Starting emulator with configuration:")
        for key, value in config.items():
            if isinstance(value, float):
                self.info(f"  {key}: {value:.4f}")
            else:
                self.info(f"  {key}: {value}")
        self.info("=" * 60)

    def log_fault(self, error: BaseException, dump: Optional[str] = None):
        """Log a fatal machine error, with the machine dump when available."""
        self.error(f"{type(error).__name__}: {error}")
        if dump:
            for line in dump.splitlines():
                self.error(f"  {line}")

    def log_run_end(self, cycles: int):
        """Log how many instructions ran and how fast."""
        elapsed = time.time() - self.run_start_time
        ips = cycles / elapsed if elapsed > 0 else 0.0
        self.info(f"Stopped after {cycles} instructions in {elapsed:.1f}s ({ips:.0f} Hz)")


class LoggingCallback:
    """Base class for run loop callbacks."""

    def on_start(self, config: Dict[str, Any]):
        """Called before the first step."""
        pass

    def on_step(self, machine: Any, instruction: Any):
        """Called after every executed instruction."""
        pass

    def on_error(self, machine: Any, error: BaseException):
        """Called when the loop stops on a fatal error."""
        pass

    def on_stop(self, machine: Any):
        """Called when the loop exits, whatever the reason."""
        pass


class ConsoleCallback(LoggingCallback):
    """Start banner, fault report and run summary on the console."""

    def __init__(self, logger: Optional[EmulatorLogger] = None):
        self.logger = logger or EmulatorLogger()

    def on_start(self, config: Dict[str, Any]):
        self.logger.log_run_start(config)

    def on_error(self, machine: Any, error: BaseException):
        self.logger.log_fault(error, machine.dump())

    def on_stop(self, machine: Any):
        self.logger.log_run_end(machine.cycles)


class TraceCallback(LoggingCallback):
    """Machine dump after every instruction, at DEBUG level."""

    def __init__(self, logger: Optional[ConsoleLogger] = None):
        self.logger = logger or ConsoleLogger(name="trace", log_level="DEBUG")

    def on_step(self, machine: Any, instruction: Any):
        if self.logger.is_enabled_for("DEBUG"):
            self.logger.debug(f"{instruction}\n{machine.dump()}")


class ProgressCallback(LoggingCallback):
    """tqdm progress bar over a fixed number of steps."""

    def __init__(self, total: int, desc: Optional[str] = None, print_rate: Optional[int] = None, **kwargs):
        self.total = total
        self.desc = desc or f"Running ({total:,} steps)"
        self.print_rate = max(1, print_rate or min(total // 20, 500) or 1)
        self.kwargs = kwargs
        self.bar = None
        self._pending = 0

    def on_start(self, config: Dict[str, Any]):
        self.bar = tqdm(total=self.total, desc=self.desc, unit="step", **self.kwargs)

    def on_step(self, machine: Any, instruction: Any):
        self._pending += 1
        if self._pending >= self.print_rate and self.bar is not None:
            self.bar.update(self._pending)
            self._pending = 0

    def on_stop(self, machine: Any):
        if self.bar is not None:
            self.bar.update(self._pending)
            self._pending = 0
            self.bar.close()


def dispatch(callbacks: List[LoggingCallback], hook: str, *args):
    """Call ``hook`` on every callback."""
    for callback in callbacks:
        getattr(callback, hook)(*args)
