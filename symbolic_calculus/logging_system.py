"""
Logging System for the Symbolic Calculus Engine

Centralized logger with verbosity levels. The transforms report fixed-point
iteration traces, iteration-limit warnings, approximation notices and Taylor
term construction through it.
"""

import logging
import sys
from typing import Optional
from enum import Enum
from datetime import datetime


class LogLevel(Enum):
    """Verbosity levels for the engine"""
    SILENT = 0      # No output at all
    MINIMAL = 1     # Warnings only
    MODERATE = 2    # Key milestones
    DETAILED = 3    # Per-transform summaries
    VERBOSE = 4     # Everything, including per-iteration debug traces


class SymbolicCalculusLogger:
    """
    Thin wrapper over the standard 'symbolic_calculus' logger that filters
    messages by LogLevel before they reach the handlers.
    """

    def __init__(self, log_level: LogLevel = LogLevel.MINIMAL,
                 log_to_file: bool = False, log_file_path: Optional[str] = None):
        self.log_level = log_level
        self.log_to_file = log_to_file

        self.logger = logging.getLogger('symbolic_calculus')
        self.logger.setLevel(logging.DEBUG)
        self.logger.propagate = False
        self.logger.handlers.clear()

        formatter = logging.Formatter(
            '%(asctime)s - %(levelname)s - %(message)s',
            datefmt='%H:%M:%S'
        )

        if self.log_level != LogLevel.SILENT:
            console_handler = logging.StreamHandler(sys.stderr)
            console_handler.setFormatter(formatter)
            self.logger.addHandler(console_handler)

        if log_to_file:
            if log_file_path is None:
                log_file_path = f"symbolic_calculus_{datetime.now().strftime('%Y%m%d_%H%M%S')}.log"
            file_handler = logging.FileHandler(log_file_path)
            file_handler.setFormatter(formatter)
            self.logger.addHandler(file_handler)

    def _should_log(self, required_level: LogLevel) -> bool:
        return self.log_level.value >= required_level.value

    def info(self, message: str, required_level: LogLevel = LogLevel.MODERATE):
        """General information with configurable level"""
        if self._should_log(required_level):
            self.logger.info(message)

    def warning(self, message: str):
        """Warnings - shown from minimal level onwards"""
        if self._should_log(LogLevel.MINIMAL):
            self.logger.warning(message)

    def debug(self, message: str):
        """Debug information - only in verbose mode"""
        if self._should_log(LogLevel.VERBOSE):
            self.logger.debug(f"DEBUG: {message}")

    def approximation(self, construct: str, caveat: str):
        """Derivative rule that is knowingly inexact - verbose only"""
        self.debug(f"d/dx {construct} approximated: {caveat}")

    def transform_summary(self, name: str, before_size: int, after_size: int,
                          iterations: Optional[int] = None):
        """Node counts around a transform - shown from detailed level"""
        if self._should_log(LogLevel.DETAILED):
            suffix = f" in {iterations} iteration(s)" if iterations is not None else ""
            self.logger.info(f"{name}: {before_size} -> {after_size} nodes{suffix}")

    def is_verbose(self) -> bool:
        return self._should_log(LogLevel.VERBOSE)


# Global logger instance
_global_logger: Optional[SymbolicCalculusLogger] = None


def get_logger() -> SymbolicCalculusLogger:
    """Get or create the global logger instance"""
    global _global_logger
    if _global_logger is None:
        _global_logger = SymbolicCalculusLogger()
    return _global_logger


def set_log_level(level: LogLevel):
    """Set the global logging level"""
    global _global_logger
    if _global_logger is None:
        _global_logger = SymbolicCalculusLogger(log_level=level)
    else:
        _global_logger.log_level = level


def configure_logging(log_level: LogLevel = LogLevel.MINIMAL,
                      log_to_file: bool = False,
                      log_file_path: Optional[str] = None) -> SymbolicCalculusLogger:
    """Configure the global logging system"""
    global _global_logger
    _global_logger = SymbolicCalculusLogger(
        log_level=log_level,
        log_to_file=log_to_file,
        log_file_path=log_file_path
    )
    return _global_logger


def log_info(message: str, level: LogLevel = LogLevel.MODERATE):
    get_logger().info(message, level)


def log_warning(message: str):
    get_logger().warning(message)


def log_debug(message: str):
    get_logger().debug(message)


def log_approximation(construct: str, caveat: str):
    get_logger().approximation(construct, caveat)


def log_transform_summary(name: str, before_size: int, after_size: int,
                          iterations: Optional[int] = None):
    get_logger().transform_summary(name, before_size, after_size, iterations)
