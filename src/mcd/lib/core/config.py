# SPDX-FileCopyrightText: 2025-2026 Jiri Vyskocil <jiri@vyskocil.com>
#
# SPDX-License-Identifier: Apache-2.0

import os
import sys
from pathlib import Path
from typing import Any

import yaml  # pip install pyyaml

from .errors import ConfigError
from .paths import APP_NAME, config_root

CONFIG_NAME = "config.yml"

# ---------- Global config discovery ----------


def global_config_search_paths() -> list[Path]:
    """Return the ordered list of paths that will be checked for global config.

    Behavior matches global_config_path():
    - If MCD_CONFIG_FILE is set, only that single path is considered.
    - Otherwise, check in order:
        1) config_root()/config.yml (MCD_CONFIG_DIR, /etc/mcd for root,
           else the platform user config dir)
        2) sys.prefix/etc/mcd/config.yml
        3) /etc/mcd/config.yml
    """
    env_file = os.environ.get("MCD_CONFIG_FILE")
    if env_file:
        return [Path(env_file).expanduser().resolve()]

    candidates = [
        config_root() / CONFIG_NAME,
        Path(sys.prefix) / "etc" / APP_NAME / CONFIG_NAME,
        Path("/etc") / APP_NAME / CONFIG_NAME,
    ]
    # As root, config_root() is /etc/mcd; keep it in its system-wide slot at the end.
    return list(reversed(dict.fromkeys(reversed(candidates))))


def global_config_path() -> Path:
    """Global config file path (resolved based on search paths).

    Resolution order (first existing wins, except explicit override is returned even
    if missing to make intent visible to the user). If none exist, return the last
    candidate (/etc/mcd/config.yml).
    """
    candidates = global_config_search_paths()
    # If MCD_CONFIG_FILE is set, candidates has a single element and we
    # want to return it even if it doesn't exist.
    if len(candidates) == 1:
        return candidates[0]

    for c in candidates:
        if c.is_file():
            return c.resolve()
    return candidates[-1]


# ---------- Global config ----------


def load_global_config() -> dict[str, Any]:
    """Load the global config file, returning ``{}`` when it is missing or empty."""
    cfg_path = global_config_path()
    if not cfg_path.is_file():
        return {}
    try:
        data = yaml.safe_load(cfg_path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid YAML in {cfg_path}: {e}") from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"{cfg_path} must contain a mapping at the top level")
    return data
