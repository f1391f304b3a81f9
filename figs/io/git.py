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

"""Git retrieval of configuration files for Figs.

A figfile with ``method: git`` lists a repository followed by the files to
read from it:

    location:
      - git@github.com:acme/settings.git
      - shared.yml
      - services/api.yml
    method: git

The repository is shallow-cloned into a scratch directory, the requested
files are copied into a destination directory, and the scratch clone is
removed. The returned local paths are what the loader reads.

Example:
    ```python
    from figs.io.git import clone_files

    paths = clone_files(
        "git@github.com:acme/settings.git", ["shared.yml", "services/api.yml"]
    )
    ```
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
import shutil
import subprocess
import tempfile

from figs.exceptions import FetchError
from figs.logging import get_global_logger

DEFAULT_TIMEOUT = 120


def clone_files(
    repository: str,
    filenames: Sequence[str],
    *,
    destination: Path | None = None,
    timeout: int = DEFAULT_TIMEOUT,
) -> list[Path]:
    """Clone a repository and copy the named files out of it.

    Files that do not exist in the repository are skipped with a warning;
    the loader would treat them as empty anyway.

    Args:
        repository: Anything ``git clone`` accepts (URL, SSH spec, local path).
        filenames: Paths relative to the repository root.
        destination: Directory to copy the files into. A fresh temporary
            directory is created when omitted.
        timeout: Seconds to wait for the clone.

    Returns:
        Local paths of the copied files, in the order requested.

    Raises:
        FetchError: If git is unavailable, the clone fails or times out, or
            a filename points outside the repository.
    """
    logger = get_global_logger()

    git = shutil.which("git")
    if not git:
        raise FetchError("git executable not found on PATH")

    if destination is None:
        destination = Path(tempfile.mkdtemp(prefix="figs-"))
    destination.mkdir(parents=True, exist_ok=True)

    copied: list[Path] = []
    with tempfile.TemporaryDirectory(prefix="figs-clone-") as scratch:
        checkout = Path(scratch) / "repo"
        logger.verbose("GIT", f"Cloning {repository}")
        try:
            subprocess.run(
                [git, "clone", "--quiet", "--depth", "1", repository, str(checkout)],
                check=True,
                capture_output=True,
                text=True,
                timeout=timeout,
            )
        except subprocess.CalledProcessError as err:
            raise FetchError(
                f"git clone failed for {repository}: {err.stderr.strip() or err}"
            ) from err
        except subprocess.TimeoutExpired:
            raise FetchError(f"git clone timed out for {repository}") from None

        root = checkout.resolve()
        for name in filenames:
            source = (checkout / name).resolve()
            if not source.is_relative_to(root):
                raise FetchError(f"refusing to read outside the repository: {name}")
            if not source.is_file():
                logger.warning("GIT", f"{name} not found in {repository}")
                continue
            target = destination / name
            target.parent.mkdir(parents=True, exist_ok=True)
            shutil.copyfile(source, target)
            logger.debug("GIT", f"Copied {name} -> {target}")
            copied.append(target)

    return copied
