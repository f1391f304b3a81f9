# Copyright 2025 Roger Cibrian
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Logging interface for Figs.

Library modules report what they load and skip through a small logger
protocol instead of printing directly. The global logger is silent until
an application installs a different one.

The logger supports four output kinds:
- Step: Always printed (for progress indicators)
- Verbose: Only printed when verbose mode is enabled
- Debug: Only printed when debug mode is enabled (implies verbose)
- Warning: Always printed (degraded configuration sources)

Example:
    Configure global logger:
        ```python
        from figs.logging import get_logger, set_global_logger

        set_global_logger(get_logger(verbose=True))
        ```

    Use in library code:
        ```python
        from figs.logging import get_global_logger

        logger = get_global_logger()
        logger.verbose("CONFIG", "Loading: config/application.yml")
        logger.debug("ENV", "Skipping externally set key: DATABASE_URL")
        ```
"""

from __future__ import annotations

from typing import Protocol


class Logger(Protocol):
    """Protocol for logger implementations."""

    def step(self, step: int, total: int, message: str) -> None:
        """Print a step indicator.

        Args:
            step: Current step number (1-based).
            total: Total number of steps.
            message: Step description.
        """
        ...

    def verbose(self, prefix: str, message: str) -> None:
        """Print a verbose log message.

        Args:
            prefix: Message prefix (e.g., "CONFIG", "ENV").
            message: Log message.
        """
        ...

    def debug(self, prefix: str, message: str) -> None:
        """Print a debug log message.

        Args:
            prefix: Message prefix (e.g., "GIT", "HTTP").
            message: Log message.
        """
        ...

    def warning(self, prefix: str, message: str) -> None:
        """Print a warning message.

        Args:
            prefix: Message prefix (e.g., "CONFIG").
            message: Warning text.
        """
        ...


class DefaultLogger:
    """Logger that prints to stdout, gated by verbose and debug flags."""

    def __init__(self, verbose: bool = False, debug: bool = False) -> None:
        """Initialize logger with verbosity settings.

        Args:
            verbose: If True, print verbose messages.
            debug: If True, print debug messages (implies verbose).
        """
        self._verbose = verbose or debug
        self._debug = debug

    def step(self, step: int, total: int, message: str) -> None:
        print(f"[{step}/{total}] {message}")

    def verbose(self, prefix: str, message: str) -> None:
        if self._verbose:
            print(f"[{prefix}] {message}")

    def debug(self, prefix: str, message: str) -> None:
        if self._debug:
            print(f"[{prefix}] {message}")

    def warning(self, prefix: str, message: str) -> None:
        print(f"[WARNING] [{prefix}] {message}")


class SilentLogger:
    """Logger that suppresses all output."""

    def step(self, step: int, total: int, message: str) -> None:
        pass

    def verbose(self, prefix: str, message: str) -> None:
        pass

    def debug(self, prefix: str, message: str) -> None:
        pass

    def warning(self, prefix: str, message: str) -> None:
        pass


# Global logger instance (defaults to silent)
_global_logger: Logger = SilentLogger()


def get_logger(verbose: bool = False, debug: bool = False) -> Logger:
    """Get a logger instance with specified verbosity.

    Args:
        verbose: If True, logger will print verbose messages.
        debug: If True, logger will print debug messages (implies verbose).

    Returns:
        A logger instance configured with the specified verbosity.
    """
    return DefaultLogger(verbose=verbose, debug=debug)


def get_global_logger() -> Logger:
    """Get the global logger instance.

    Returns:
        The current global logger instance.
    """
    return _global_logger


def set_global_logger(logger: Logger) -> None:
    """Set the global logger instance.

    Args:
        logger: Logger instance to use as the global logger.

    Note:
        This affects every library function that logs through
        get_global_logger().
    """
    global _global_logger
    _global_logger = logger
