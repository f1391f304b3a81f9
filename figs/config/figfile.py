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

"""Figfile descriptors: where configuration lives and how to get it.

A figfile is a small YAML document naming one or more configuration
sources and the retrieval method:

    location: config/application.yml
    method: path

    location:
      - config/shared.yml
      - config/local.yml
    method: path

    location:
      - git@github.com:acme/settings.git
      - shared.yml
    method: git

    location: https://config.example.com/application.yml
    method: http

Methods
-------
path : the location is used as-is (a path or list of paths).
git : location[0] is a repository, the rest are files inside it.
http : every location is a URL to download.

Remote retrieval failures are logged as warnings and resolve to no paths,
which the loader reads as an empty configuration.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path
import tempfile
from typing import Any, Literal

import yaml

from figs.exceptions import ConfigError, FetchError

Method = Literal["path", "git", "http"]

METHODS: tuple[str, ...] = ("path", "git", "http")

# File read from a git repository when the figfile names only the repository
DEFAULT_REPOSITORY_FILE = "application.yml"


def cast_location(raw: Any) -> str | list[str]:
    """Cast a location to a string, or to a list of strings for sequences."""
    if isinstance(raw, (str, Path)):
        return str(raw)
    if isinstance(raw, Sequence):
        return [str(item) for item in raw]
    raise ConfigError(
        f"figfile 'location' must be a string or a list, got {type(raw).__name__}"
    )


@dataclass(frozen=True)
class Figfile:
    """Parsed figfile descriptor.

    Attributes:
        location: A single location or an ordered list of locations.
        method: Retrieval method, one of METHODS.
    """

    location: str | list[str]
    method: Method = "path"

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> Figfile:
        """Build a Figfile from a parsed YAML mapping.

        Raises:
            ConfigError: If 'location' is missing or 'method' is unknown.
        """
        if not isinstance(data, Mapping):
            raise ConfigError("figfile must be a mapping with 'location' and 'method'")
        if data.get("location") is None:
            raise ConfigError("figfile is missing 'location'")

        method = str(data.get("method") or "path").lower()
        if method not in METHODS:
            raise ConfigError(
                f"unknown figfile method {method!r} (expected one of: {', '.join(METHODS)})"
            )
        return cls(location=cast_location(data["location"]), method=method)  # type: ignore[arg-type]

    @property
    def locations(self) -> list[str]:
        """The location as a list, whatever its original shape."""
        if isinstance(self.location, str):
            return [self.location]
        return list(self.location)


def load_figfile(path: Path) -> Figfile | None:
    """Read a figfile from disk.

    Args:
        path: Figfile path.

    Returns:
        The parsed Figfile, or None if the file does not exist.

    Raises:
        ConfigError: On YAML parse errors, empty files, or invalid content.
    """
    if not path.is_file():
        return None
    try:
        with path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as err:
        raise ConfigError(f"Error parsing figfile: {path}: {err}") from err
    if data is None:
        raise ConfigError(f"figfile is empty: {path}")
    return Figfile.from_mapping(data)


def resolve_location(
    figfile: Figfile, *, cache_dir: Path | None = None
) -> str | list[str]:
    """Turn a figfile into the path or paths the loader should read.

    Args:
        figfile: The descriptor to resolve.
        cache_dir: Where remote methods store retrieved files. When omitted
            a fresh temporary directory is created and the caller owns its
            removal; Application passes its own cache directory.

    Returns:
        For 'path', the location unchanged. For 'git' and 'http', the list
            of local files retrieved (empty if retrieval failed).
    """
    from figs.io import clone_files, download_configs
    from figs.logging import get_global_logger

    logger = get_global_logger()

    if figfile.method == "path":
        return figfile.location

    if cache_dir is None:
        cache_dir = Path(tempfile.mkdtemp(prefix=f"figs-{figfile.method}-"))

    try:
        if figfile.method == "git":
            repository, *filenames = figfile.locations
            retrieved = clone_files(
                repository,
                filenames or [DEFAULT_REPOSITORY_FILE],
                destination=cache_dir,
            )
        else:
            retrieved = download_configs(figfile.locations, cache_dir)
    except FetchError as err:
        logger.warning("CONFIG", f"Could not retrieve configuration: {err}")
        return []

    logger.verbose(
        "CONFIG", f"Retrieved {len(retrieved)} file(s) via {figfile.method}"
    )
    return [str(p) for p in retrieved]
