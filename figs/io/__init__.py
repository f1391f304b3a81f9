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

"""Retrieval of remote configuration sources for Figs.

Modules:

git : module
    Shallow-clone a repository and copy named files out of it.
download : module
    HTTP(S) download of configuration files with retries.

Both raise FetchError on failure; the figfile resolver turns that into an
empty set of paths so configuration loading degrades instead of failing.
"""

from .download import download_config, download_configs, make_session
from .git import clone_files

__all__ = ["clone_files", "download_config", "download_configs", "make_session"]
