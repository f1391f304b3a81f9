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

"""Exception hierarchy for Figs.

All exceptions inherit from FigsError, allowing users to catch every Figs
error with a single except clause if needed.

Only MissingKeyError reaches callers during normal use. Problems reading or
parsing a configuration source are recovered inside the loader as an empty
contribution, so ConfigError and FetchError are limited to malformed
descriptors and documents and to the retrieval helpers in figs.io.

Example:
    Requiring a key:
        ```python
        from figs import ENV
        from figs.exceptions import MissingKeyError

        try:
            url = ENV.dynamic("database_url!")
        except MissingKeyError as e:
            print(f"Missing setting: {e}")
        ```
"""

from __future__ import annotations

__all__ = [
    "FigsError",
    "MissingKeyError",
    "ConfigError",
    "FetchError",
]


class FigsError(Exception):
    """Base exception for all Figs errors."""

    pass


class MissingKeyError(FigsError, KeyError):
    """Raised when a required key has no case-insensitive match.

    Raised by the required lookup mode (``ENV.dynamic("name!")`` or
    ``ENV.lookup("name", LookupMode.REQUIRED)``) and by ``require_keys``.

    Attributes:
        keys: The requested key names, upper-cased as they were searched.
    """

    def __init__(self, message: str, keys: tuple[str, ...] = ()) -> None:
        super().__init__(message)
        self.keys = keys

    def __str__(self) -> str:
        # KeyError would otherwise repr() the message
        return str(self.args[0])


class ConfigError(FigsError):
    """Raised for configuration-related errors.

    This exception is raised when there are problems with:

    - Figfile descriptors (missing 'location', unknown 'method')
    - Configuration documents whose top level is not a mapping
    """

    pass


class FetchError(FigsError):
    """Raised when a remote configuration source cannot be retrieved.

    This exception is raised when there are problems with:

    - Cloning a git repository (git missing, clone failure)
    - Copying a requested file out of a cloned repository
    - Downloading a configuration file over HTTP(S)
    """

    pass
