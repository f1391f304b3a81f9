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

"""Stage-aware configuration loading and merging for Figs.

Each configuration file is a YAML mapping of settings, optionally with
blocks named after stages:

    database_host: localhost
    log_level: info
    test:
      database_host: test-db
    production:
      log_level: warn

Loading for a stage takes the top-level settings, drops every block (any
top-level value that is itself a mapping), and lays the block named after
the current stage on top. For stage "test" the file above yields
``{"database_host": "test-db", "log_level": "info"}``.

Templates
---------
Files are rendered with Jinja2 before parsing. The template context has
``env`` (the process environment) and ``stage``:

    secret_key: {{ env.SECRET_KEY | default("dev-only") }}
    bucket: assets-{{ stage }}

Merge Behavior
--------------
Within a file, stage values replace top-level values of the same key.
Across files, later files replace earlier ones key by key ("last wins");
keys that do not collide are all kept. The merge is shallow.

Error Handling
--------------
- Missing or unreadable file: empty contribution
- Template or YAML syntax error: empty contribution, logged as a warning
- Top-level document that is not a mapping: ConfigError

Functions
---------
load_configuration : function
    Load and merge configuration for a stage (main public API).
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
import os
from pathlib import Path
from typing import Any

import jinja2
import yaml

from figs.exceptions import ConfigError
from figs.logging import get_global_logger

PathLike = str | os.PathLike[str]

# -------------------------------
# Reading and rendering
# -------------------------------


def _read_text(p: Path) -> str | None:
    """Return the file's text, or None when it cannot be read."""
    if not p.is_file():
        get_global_logger().verbose("CONFIG", f"Not found, skipping: {p}")
        return None
    try:
        return p.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as err:
        get_global_logger().warning("CONFIG", f"Could not read {p}: {err}")
        return None


def _render_template(text: str, context: Mapping[str, Any]) -> str:
    """Expand Jinja2 expressions in the raw file text."""
    environment = jinja2.Environment(keep_trailing_newline=True, autoescape=False)
    return environment.from_string(text).render(**context)


def _parse_document(p: Path, text: str, context: Mapping[str, Any]) -> dict[Any, Any]:
    """Render and parse one document.

    Raises:
        ConfigError: If the top-level YAML value is not a mapping.
    """
    logger = get_global_logger()
    try:
        rendered = _render_template(text, context)
    except jinja2.TemplateError as err:
        logger.warning("CONFIG", f"Template error in {p}: {err}")
        return {}
    try:
        data = yaml.safe_load(rendered)
    except yaml.YAMLError as err:
        logger.warning("CONFIG", f"Error parsing YAML: {p}: {err}")
        return {}
    if data is None:
        # Blank or comments-only document
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"top-level YAML must be a mapping (dict): {p}")
    return data


# -------------------------------
# Merge logic
# -------------------------------


def _stage_configuration(raw: dict[Any, Any], stage: str) -> dict[Any, Any]:
    """Flatten one parsed document for a stage.

    Top-level mappings are stage blocks; only the block named ``stage`` is
    used and it wins over top-level keys.
    """
    result = {k: v for k, v in raw.items() if not isinstance(v, dict)}
    block = raw.get(stage)
    if isinstance(block, dict):
        result.update(block)
    return result


def _print_yaml_content(data: Mapping[Any, Any]) -> None:
    """Log a mapping as YAML in debug mode."""
    logger = get_global_logger()
    yaml_str = yaml.safe_dump(dict(data), default_flow_style=False, sort_keys=False)
    for line in yaml_str.split("\n"):
        if line.strip():
            logger.debug("CONFIG", line)


def _normalize_paths(paths: PathLike | Sequence[PathLike]) -> list[Path]:
    if isinstance(paths, (str, os.PathLike)):
        return [Path(paths)]
    return [Path(p) for p in paths]


# -------------------------------
# Public API
# -------------------------------


def load_configuration(
    paths: PathLike | Sequence[PathLike],
    stage: str,
    *,
    environ: Mapping[str, str] | None = None,
) -> dict[Any, Any]:
    """Load and merge the configuration for a stage.

    Performs the following for each path, in order:

    1. Read the raw text (missing file -> empty contribution)
    2. Render Jinja2 expressions
    3. Parse YAML (blank document -> empty mapping)
    4. Keep top-level settings, drop stage blocks, apply the block for stage
    5. Merge into the result, later files winning on collision

    Args:
        paths: A single path or an ordered list of paths.
        stage: Stage whose block overrides top-level settings.
        environ: Mapping exposed to templates as ``env``. Defaults to
            os.environ.

    Returns:
        The merged configuration. Always a dict, possibly empty.

    Raises:
        ConfigError: If a document's top level is not a mapping.

    Example:
        ```python
        from figs.config.loader import load_configuration

        cfg = load_configuration(["config/shared.yml", "config/app.yml"], "test")
        ```
    """
    logger = get_global_logger()
    context = {"env": os.environ if environ is None else environ, "stage": stage}

    merged: dict[Any, Any] = {}
    for p in _normalize_paths(paths):
        text = _read_text(p)
        if text is None:
            continue
        logger.verbose("CONFIG", f"Loading: {p} (stage: {stage})")
        contribution = _stage_configuration(_parse_document(p, text, context), stage)
        logger.debug("CONFIG", f"--- Content from {p.name} ---")
        _print_yaml_content(contribution)
        merged.update(contribution)

    logger.verbose("CONFIG", f"Final config has {len(merged)} key(s)")
    return merged
