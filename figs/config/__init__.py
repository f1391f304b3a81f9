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

"""Configuration resolution and loading for Figs.

This package locates configuration files through a figfile, merges the
settings for the active stage, and writes them into the environment:

  - figfile: descriptor of where configuration lives (path, git, http)
  - loader: Jinja2 rendering, YAML parsing and stage-aware merging
  - application: path/stage resolution and materialization into ENV

Example:
    Basic usage:
        ```python
        from figs.config import Application, load_configuration

        cfg = load_configuration("config/application.yml", "test")
        Application(stage="test").load()
        ```
"""

from .application import Application, load
from .figfile import Figfile, load_figfile, resolve_location
from .loader import load_configuration

__all__ = [
    "Application",
    "Figfile",
    "load",
    "load_configuration",
    "load_figfile",
    "resolve_location",
]
