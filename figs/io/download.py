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

"""HTTP(S) retrieval of configuration files for Figs.

A figfile with ``method: http`` lists one or more URLs. Each is downloaded
into a local directory and the loader reads the local copies.

Key Features:

- **Retry Logic with Exponential Backoff** - Transient failures (429, 500,
  502, 503, 504) are retried through urllib3.util.Retry.
- **Atomic Writes** - Content is written to a .part file and renamed into
  place on success.

Example:
    ```python
    from pathlib import Path
    from figs.io.download import download_config

    path = download_config(
        "https://config.example.com/application.yml", Path("./.figs")
    )
    ```
"""

from __future__ import annotations

from pathlib import Path
from urllib.parse import urlparse

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from figs import __version__
from figs.exceptions import FetchError
from figs.logging import get_global_logger


def _filename_from_url(url: str, index: int) -> str:
    name = Path(urlparse(url).path).name
    # Prefix keeps two URLs ending in the same name apart
    return f"{index:02d}-{name or 'config.yml'}"


def make_session() -> requests.Session:
    """Create a requests.Session with retry/backoff defaults."""
    s = requests.Session()
    retries = Retry(
        total=5,
        backoff_factor=0.5,
        status_forcelist=(429, 500, 502, 503, 504),
        allowed_methods=("GET", "HEAD"),
        raise_on_status=False,
    )
    s.headers.update({"User-Agent": f"figs/{__version__}"})
    s.mount("http://", HTTPAdapter(max_retries=retries))
    s.mount("https://", HTTPAdapter(max_retries=retries))
    return s


def download_config(
    url: str,
    destination_folder: Path,
    *,
    index: int = 0,
    timeout: int = 30,
    session: requests.Session | None = None,
) -> Path:
    """Download one configuration file.

    Args:
        url: Source URL.
        destination_folder: Folder to save into (created if missing).
        index: Position of the URL in the figfile location, used to keep
            local file names unique.
        timeout: Per-request timeout (seconds).
        session: Session to reuse. A new one is created when omitted.

    Returns:
        Path of the downloaded file.

    Raises:
        FetchError: On connection errors or non-2xx responses (after retries).
    """
    logger = get_global_logger()
    destination_folder = Path(destination_folder)
    destination_folder.mkdir(parents=True, exist_ok=True)

    owns_session = session is None
    if session is None:
        session = make_session()
    try:
        logger.verbose("HTTP", f"GET {url}")
        try:
            resp = session.get(url, allow_redirects=True, timeout=timeout)
            resp.raise_for_status()
        except requests.RequestException as err:
            raise FetchError(f"download failed for {url}: {err}") from err
        logger.debug("HTTP", f"Response: {resp.status_code} {resp.reason}")

        target = destination_folder / _filename_from_url(url, index)
        tmp = target.with_suffix(target.suffix + ".part")
        tmp.write_bytes(resp.content)
        tmp.replace(target)
        logger.debug("HTTP", f"Saved {url} -> {target}")
        return target
    finally:
        if owns_session:
            session.close()


def download_configs(urls: list[str], destination_folder: Path) -> list[Path]:
    """Download several configuration files with one session, in order.

    Raises:
        FetchError: On the first URL that cannot be retrieved.
    """
    with make_session() as session:
        return [
            download_config(url, destination_folder, index=i, session=session)
            for i, url in enumerate(urls)
        ]
