"""
Logging for regioclima: package logger setup, step timing and
calculation-issue reporting.
"""

import logging
import sys
import time
import traceback
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Optional, Dict, Any, List

PACKAGE_LOGGER = "regioclima"

_FORMATS = {
    "detailed": ("%(asctime)s | %(levelname)-8s | %(name)s | %(message)s", "%Y-%m-%d %H:%M:%S"),
    "simple": ("%(levelname)s: %(message)s", None),
    "minimal": ("%(message)s", None),
}

# Active timing logger, replaced on every setup_logging() call
_timing_logger: Optional["TimingLogger"] = None


@dataclass
class StepTiming:
    name: str
    start: float
    duration: Optional[float] = None
    success: Optional[bool] = None


class TimingLogger:
    """Records wall-clock duration and outcome of named driver steps."""

    def __init__(self):
        self.steps: List[StepTiming] = []
        self.current_step: Optional[StepTiming] = None
        self.start_time: float = time.time()

    def start_step(self, name: str) -> None:
        self.current_step = StepTiming(name=name, start=time.time())

    def end_step(self, success: bool = True) -> float:
        """Close the open step and return its duration (0 if none is open)."""
        if self.current_step is None:
            return 0.0

        step = self.current_step
        step.duration = time.time() - step.start
        step.success = success
        self.steps.append(step)
        self.current_step = None
        return step.duration

    @property
    def failed_steps(self) -> List[str]:
        return [step.name for step in self.steps if not step.success]

    def get_summary(self) -> str:
        """Formatted table of step durations."""
        total = time.time() - self.start_time

        lines = ["", "═" * 60, "  TIMING SUMMARY", "─" * 60]
        for step in self.steps:
            mark = "✓" if step.success else "✗"
            lines.append(f"  {mark} {step.name}: {step.duration or 0.0:.2f}s")
        lines.extend([
            "─" * 60,
            f"  {len(self.steps)} steps, {len(self.failed_steps)} failed, total {total:.2f}s",
            "═" * 60,
        ])
        return "\n".join(lines)


def get_timing_logger() -> Optional[TimingLogger]:
    return _timing_logger


def setup_logging(
    level: str = "INFO",
    log_dir: Optional[str] = None,
    experiment_name: Optional[str] = None,
    format_style: str = "detailed",
    always_save: bool = True,
    include_timestamp: bool = False,
) -> logging.Logger:
    """
    Configure the ``regioclima`` logger.

    Parameters
    ----------
    level : str
        Console log level (DEBUG, INFO, WARNING, ERROR).
    log_dir : str, optional
        Directory for a log file. No file is written when omitted.
    experiment_name : str, optional
        Log file stem. Defaults to ``regioclima``.
    format_style : str
        One of 'detailed', 'simple', 'minimal'.
    always_save : bool
        Write the log file when ``log_dir`` is given.
    include_timestamp : bool
        Append a timestamp to the log file name.

    Returns
    -------
    logging.Logger
        The configured package logger.
    """
    global _timing_logger
    _timing_logger = TimingLogger()

    numeric_level = getattr(logging, level.upper(), logging.INFO)
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(logging.DEBUG if log_dir and always_save else numeric_level)
    logger.handlers = []

    fmt, datefmt = _FORMATS.get(format_style, _FORMATS["minimal"])
    formatter = logging.Formatter(fmt, datefmt=datefmt)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(numeric_level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_dir and always_save:
        log_path = Path(log_dir)
        log_path.mkdir(parents=True, exist_ok=True)

        stem = experiment_name or PACKAGE_LOGGER
        if include_timestamp:
            stem = f"{stem}_{datetime.now().strftime('%Y%m%d_%H%M%S')}"

        # File gets everything, console only the requested level
        file_handler = logging.FileHandler(log_path / f"{stem}.log")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger


def start_step(name: str) -> None:
    logging.getLogger(PACKAGE_LOGGER).info(f"Starting: {name}")
    if _timing_logger:
        _timing_logger.start_step(name)


def end_step(success: bool = True) -> float:
    duration = _timing_logger.end_step(success) if _timing_logger else 0.0
    status = "completed" if success else "FAILED"
    logging.getLogger(PACKAGE_LOGGER).info(f"Step {status} in {duration:.2f}s")
    return duration


def log_error(error: Exception, context: str = "") -> None:
    """Log an error with its traceback (traceback at DEBUG)."""
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.error(f"ERROR in {context}: {type(error).__name__}: {error}")
    logger.debug(traceback.format_exc())


def log_calculation_issue(
    issue_type: str,
    description: str,
    details: Dict[str, Any],
) -> None:
    """Report a numerical problem (NaN, Inf, out-of-band value)."""
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.warning(f"Calculation issue [{issue_type}]: {description}")
    if details:
        logger.debug(f"  Details: {details}")
