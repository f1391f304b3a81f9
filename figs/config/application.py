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

"""Application configuration context for Figs.

An Application answers three questions, each on every call:

- path: which file or files hold the configuration
- stage: which stage block applies
- configuration(): the merged settings for that path and stage

Explicit values (constructor arguments or setters) win. Otherwise the
default providers are consulted again on each access, so a changed
Figfile, FIGS_STAGE or patched provider is picked up without rebuilding
the Application.

load() writes the configuration into the environment. A key that is
already present in the environment is left alone unless it was written
by an earlier load() and has not been changed since; configuration only
fills the gaps around what the operator set.

Example:
    Default resolution:
        ```python
        from figs.config import Application

        app = Application()
        app.path      # from ./Figfile, else config/application.yml
        app.stage     # $FIGS_STAGE, else "development"
        app.load()
        ```

    Explicit figfile and stage:
        ```python
        app = Application(
            file={"location": ["config/shared.yml", "config/api.yml"], "method": "path"},
            stage="production",
        )
        ```
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping, Sequence
import os
from pathlib import Path
import shutil
import tempfile
from typing import Any
import weakref

from figs import env as figs_env
from figs.config.figfile import Figfile, cast_location, load_figfile, resolve_location
from figs.config.loader import load_configuration
from figs.env import TypedStore

# Companion entry marking a key as written by load()
FIG_ENV_PREFIX = "_FIG_"

DEFAULT_FIGFILE = "Figfile"
DEFAULT_PATH = Path("config") / "application.yml"
DEFAULT_STAGE = "development"

FIGFILE_VARIABLE = "FIGS_FIGFILE"
STAGE_VARIABLE = "FIGS_STAGE"


class Application:
    """Resolves, loads and materializes configuration for one process.

    Attributes:
        path: Configuration path (str) or paths (list[str]).
        stage: Active stage name.
        store: TypedStore that load() writes into (ENV by default).
    """

    def __init__(
        self,
        file: Figfile | Mapping[str, Any] | None = None,
        *,
        path: str | os.PathLike[str] | Sequence[str | os.PathLike[str]] | None = None,
        stage: Any = None,
        store: TypedStore | None = None,
    ) -> None:
        """Initialize the context.

        Args:
            file: Figfile descriptor (or its parsed mapping). Resolved once,
                here; remote methods are retrieved at this point.
            path: Explicit configuration path or paths. Ignored when file
                is given.
            stage: Explicit stage. Cast to str on access.
            store: Store to materialize into. Defaults to the process-wide
                ENV.
        """
        self._cache: Path | None = None
        if file is not None:
            figfile = file if isinstance(file, Figfile) else Figfile.from_mapping(file)
            path = resolve_location(figfile, cache_dir=self._cache_dir())
        self._path = path
        self._stage = stage
        self._store = store

    # -------------------------------
    # Path and stage
    # -------------------------------

    @property
    def path(self) -> str | list[str]:
        if self._path is not None:
            return cast_location(self._path)
        return self.default_path()

    @path.setter
    def path(self, value: Any) -> None:
        self._path = value

    @property
    def stage(self) -> str:
        if self._stage is not None:
            return str(self._stage)
        return self.default_stage()

    @stage.setter
    def stage(self, value: Any) -> None:
        self._stage = value

    @property
    def store(self) -> TypedStore:
        return self._store if self._store is not None else figs_env.ENV

    def default_figfile(self) -> Figfile | None:
        """Read the figfile named by $FIGS_FIGFILE, else ./Figfile."""
        return load_figfile(Path(os.environ.get(FIGFILE_VARIABLE, DEFAULT_FIGFILE)))

    def default_path(self) -> str | list[str]:
        """Resolve the default figfile, falling back to config/application.yml."""
        figfile = self.default_figfile()
        if figfile is not None:
            return resolve_location(figfile, cache_dir=self._cache_dir())
        return str(Path.cwd() / DEFAULT_PATH)

    def default_stage(self) -> str:
        return os.environ.get(STAGE_VARIABLE) or DEFAULT_STAGE

    def _cache_dir(self) -> Path:
        """Directory for remotely retrieved files, shared by every resolution.

        Created on first use and removed when the Application is collected
        or the interpreter exits.
        """
        if self._cache is None:
            self._cache = Path(tempfile.mkdtemp(prefix="figs-cache-"))
            weakref.finalize(self, shutil.rmtree, self._cache, ignore_errors=True)
        return self._cache

    # -------------------------------
    # Configuration
    # -------------------------------

    def configuration(self) -> dict[Any, Any]:
        """Load the merged configuration for the current path and stage.

        Files are re-read on every call.
        """
        return load_configuration(self.path, self.stage, environ=self.store.native)

    def __iter__(self) -> Iterator[tuple[Any, Any]]:
        return iter(self.configuration().items())

    def load(self) -> None:
        """Write the configuration into the store, keeping external values.

        Never warns or raises because of key or value types; the store
        stringifies them and keeps the originals in its overlay.
        """
        from figs.logging import get_global_logger

        logger = get_global_logger()
        for key, value in self:
            if self._skip(key):
                logger.debug("ENV", f"Skipping externally set key: {key}")
                continue
            self._set(key, value)

    def _skip(self, key: Any) -> bool:
        native = self.store.native
        name = str(key)
        if name not in native:
            return False
        # Overwritable only if a previous load wrote the current value
        return native.get(FIG_ENV_PREFIX + name) != native[name]

    def _set(self, key: Any, value: Any) -> None:
        store = self.store
        store.set(key, value)
        store.native[FIG_ENV_PREFIX + str(key)] = store.native[str(key)]

    def __repr__(self) -> str:
        return f"Application(path={self._path!r}, stage={self._stage!r})"


def load(
    path: Any = None,
    stage: Any = None,
    *,
    file: Figfile | Mapping[str, Any] | None = None,
    store: TypedStore | None = None,
) -> Application:
    """Build an Application and load it into the environment.

    Args:
        path: Explicit configuration path or paths.
        stage: Explicit stage.
        file: Figfile descriptor, used instead of path when given.
        store: Store to load into. Defaults to ENV.

    Returns:
        The Application that was loaded, for later inspection.
    """
    app = Application(file, path=path, stage=stage, store=store)
    app.load()
    return app
