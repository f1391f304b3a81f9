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

"""Figs - stage-aware YAML configuration for the process environment

Figs reads settings from one or more YAML files (local, in a git
repository, or over HTTP), applies the block for the current stage, and
writes the result into the environment without overriding variables the
operator already set. Values that are not strings (booleans, numbers,
lists) keep their type when read back through ENV.

Quick Start:

    import figs

    figs.load()                        # ./Figfile or config/application.yml
    figs.require_keys("database_url")
    figs.ENV.database_url              # case-insensitive lookup
    figs.ENV.dynamic("debug?")         # True/False

Package Structure:

- env: TypedStore, the process-wide ENV and lookup modes
- config: figfile resolution, stage-aware loading, Application
- io: git and HTTP retrieval of remote configuration
- exceptions: FigsError hierarchy
- logging: pluggable logger (silent by default)
"""

__version__ = "0.4.0"
__author__ = "Roger Cibrian"
__license__ = "Apache-2.0"
__description__ = "Stage-aware YAML configuration for the process environment"

# Re-export commonly used names for convenience
from figs.config import Application, Figfile, load, load_configuration
from figs.env import ENV, LookupMode, TypedStore, require_keys
from figs.exceptions import ConfigError, FetchError, FigsError, MissingKeyError

__all__ = [
    "__version__",
    "__author__",
    "__license__",
    "__description__",
    "Application",
    "Figfile",
    "load",
    "load_configuration",
    "ENV",
    "LookupMode",
    "TypedStore",
    "require_keys",
    "FigsError",
    "MissingKeyError",
    "ConfigError",
    "FetchError",
]
