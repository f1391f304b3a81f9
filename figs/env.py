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

"""Typed environment overlay for Figs.

The process environment can only hold strings. TypedStore keeps the real
environment as the single source of truth for what is set, and keeps a
side map (the overlay) with the original key and value whenever either of
them is not a string. Reads prefer the overlay, so callers get back the
booleans, numbers and lists they stored, while subprocesses still inherit
a string rendition through the real environment.

Overlay entries follow the real environment: an overlay entry whose key is
no longer present in the native map is pruned before the next read, so a
variable removed behind the store's back disappears from typed reads too.

Lookup Modes
------------
Keys can be looked up case-insensitively by name:

- LookupMode.REQUIRED: return the value or raise MissingKeyError
- LookupMode.BOOLEAN: return True if set to a non-empty value
- LookupMode.PLAIN: return the value or None

The same modes are reachable through symbolic names with a trailing "!"
or "?", either via dynamic() or attribute access on the store.

Example:
    Typed values survive the round trip:
        ```python
        from figs.env import ENV

        ENV.set("WORKERS", 4)
        ENV.get("WORKERS")        # 4
        os.environ["WORKERS"]     # "4"
        ```

    Symbolic access:
        ```python
        ENV.workers               # 4
        ENV.dynamic("workers?")   # True
        ENV.dynamic("secret!")    # raises MissingKeyError
        ```
"""

from __future__ import annotations

from collections.abc import MutableMapping
from enum import Enum
import json
import os
import re
from typing import Any

from figs.exceptions import MissingKeyError

__all__ = ["ENV", "LookupMode", "TypedStore", "require_keys", "to_native"]

_SYMBOLIC_NAME = re.compile(r"^(.+?)([!?])?$", re.DOTALL)


class LookupMode(Enum):
    """How a case-insensitive lookup resolves its result."""

    REQUIRED = "!"
    BOOLEAN = "?"
    PLAIN = ""


def to_native(value: Any) -> str:
    """Render a value the way it is written into the string-only environment.

    Args:
        value: Any value.

    Returns:
        "true"/"false" for booleans, "" for None, JSON text for lists, tuples
            and dicts, str(value) for everything else.

    Example:
        >>> to_native(True)
        'true'
        >>> to_native(["a", 1])
        '["a", 1]'
    """
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return ""
    if isinstance(value, (list, tuple, dict)):
        return json.dumps(value, default=str)
    return str(value)


def _is_blank(value: Any) -> bool:
    if value is None or value is False:
        return True
    if isinstance(value, (str, list, tuple, dict)):
        return len(value) == 0
    return False


def _parse_symbolic_name(name: str) -> tuple[str, LookupMode]:
    match = _SYMBOLIC_NAME.match(name.upper())
    if match is None:
        return "", LookupMode.PLAIN
    key, punctuation = match.groups()
    return key, LookupMode(punctuation or "")


class TypedStore:
    """Environment wrapper that preserves non-string keys and values.

    Attributes:
        native: The string-only mapping written through (os.environ by default).
        overlay: Original key/value pairs for entries that are not str/str.

    Example:
        Isolated store for tests:
            ```python
            store = TypedStore(native={})
            store.set("DEBUG", True)
            store.get("DEBUG")          # True
            store.native["DEBUG"]       # "true"
            ```
    """

    def __init__(self, native: MutableMapping[str, str] | None = None) -> None:
        """Initialize the store.

        Args:
            native: Mapping to use as the native environment. Defaults to
                os.environ.
        """
        self._native: MutableMapping[str, str] = (
            os.environ if native is None else native
        )
        self._overlay: dict[Any, Any] = {}

    @property
    def native(self) -> MutableMapping[str, str]:
        return self._native

    @property
    def overlay(self) -> dict[Any, Any]:
        return self._overlay

    # -------------------------------
    # Typed read/write
    # -------------------------------

    def set(self, key: Any, value: Any) -> None:
        """Write an entry, keeping the original types when they are not str.

        The native map always receives the stringified key and value. The
        overlay receives the original pair only when the key or the value
        is not a str; a plain str/str write drops any earlier overlay entry
        for the key.

        Args:
            key: Entry key.
            value: Entry value.
        """
        self._native[str(key)] = to_native(value)
        if isinstance(key, str) and isinstance(value, str):
            self._overlay.pop(key, None)
        else:
            self._overlay[key] = value

    def delete(self, key: Any) -> None:
        """Remove an entry from both maps. Missing keys are ignored."""
        self._native.pop(str(key), None)
        self._overlay.pop(key, None)

    def get(self, key: Any) -> Any:
        """Return the value for key, or None when unset.

        Stale overlay entries are pruned first; an overlay value wins over
        the native string.
        """
        self._prune_overlay()
        if key in self._overlay:
            return self._overlay[key]
        return self._native.get(str(key))

    def __getitem__(self, key: Any) -> Any:
        return self.get(key)

    def __setitem__(self, key: Any, value: Any) -> None:
        self.set(key, value)

    def __delitem__(self, key: Any) -> None:
        self.delete(key)

    def __contains__(self, key: Any) -> bool:
        self._prune_overlay()
        return str(key) in self._native

    def _prune_overlay(self) -> None:
        for key in list(self._overlay):
            if str(key) not in self._native:
                del self._overlay[key]

    # -------------------------------
    # Case-insensitive lookup
    # -------------------------------

    def _find(self, wanted: str) -> tuple[bool, Any]:
        """Find a case-insensitive match, overlay keys first."""
        self._prune_overlay()
        for k, v in self._overlay.items():
            if str(k).upper() == wanted:
                return True, v
        for k, v in self._native.items():
            if k.upper() == wanted:
                return True, v
        return False, None

    def has_key(self, key: str) -> bool:
        """Return True if some key matches case-insensitively."""
        return self._find(str(key).upper())[0]

    def lookup(self, key: str, mode: LookupMode = LookupMode.PLAIN) -> Any:
        """Look up a key case-insensitively.

        Args:
            key: Key name in any case.
            mode: How to resolve the result.

        Returns:
            The matched value (REQUIRED, PLAIN), None when PLAIN finds
                nothing, or a bool (BOOLEAN).

        Raises:
            MissingKeyError: In REQUIRED mode when nothing matches.
        """
        wanted = str(key).upper()
        found, value = self._find(wanted)
        if mode is LookupMode.REQUIRED:
            if not found:
                raise MissingKeyError(
                    f"Missing required Figs configuration key {wanted!r}.",
                    keys=(wanted,),
                )
            return value
        if mode is LookupMode.BOOLEAN:
            return found and not _is_blank(value)
        return value

    def dynamic(self, name: str) -> Any:
        """Resolve a symbolic accessor name such as "port", "port?" or "port!".

        A bare name that matches no key but names an attribute of the
        native mapping (e.g. "keys") returns that attribute.

        Args:
            name: Key name with an optional trailing "!" or "?".

        Returns:
            See lookup().

        Raises:
            MissingKeyError: For a "!" name with no matching key.
        """
        key, mode = _parse_symbolic_name(name)
        if mode is LookupMode.PLAIN:
            found, value = self._find(key)
            if found:
                return value
            if hasattr(self._native, name):
                return getattr(self._native, name)
            return None
        return self.lookup(key, mode)

    def responds_to(self, name: str) -> bool:
        """Return True if dynamic(name) resolves without raising.

        Args:
            name: Key name with an optional trailing "!" or "?".
        """
        if hasattr(self._native, name):
            return True
        key, mode = _parse_symbolic_name(name)
        if mode is LookupMode.REQUIRED:
            return any(k.upper() == key for k in self._native)
        return True

    def __getattr__(self, name: str) -> Any:
        # Only reached for names not defined on the class or instance
        if name.startswith("_"):
            raise AttributeError(name)
        return self.dynamic(name)

    def __repr__(self) -> str:
        native = "os.environ" if self._native is os.environ else "custom"
        return f"TypedStore(native={native}, overlay_keys={list(self._overlay)!r})"


# Process-wide store over the real environment
ENV = TypedStore()


def require_keys(*keys: str, store: TypedStore | None = None) -> None:
    """Fail unless every key has a case-insensitive match in the store.

    Args:
        *keys: Key names in any case.
        store: Store to check. Defaults to ENV.

    Raises:
        MissingKeyError: Listing every missing key, not just the first.

    Example:
        ```python
        figs.load()
        require_keys("database_url", "secret_key")
        ```
    """
    store = ENV if store is None else store
    missing = tuple(key.upper() for key in keys if not store.has_key(key))
    if missing:
        raise MissingKeyError(
            f"Missing required Figs configuration keys: {', '.join(missing)}.",
            keys=missing,
        )
