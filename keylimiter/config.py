"""Config file discovery for keylimiter.

Respects ``KEYLIMITER_CONFIG``, then ``XDG_CONFIG_HOME/keylimiter/limiter.yaml``.
"""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path


@lru_cache(maxsize=1)
def get_config_path() -> Path | None:
    """Return the default limiter config file, or None when none is configured.

    Resolution order:
    1. ``KEYLIMITER_CONFIG`` environment variable
    2. ``XDG_CONFIG_HOME/keylimiter/limiter.yaml`` (if that file exists)
    """
    env = os.environ.get("KEYLIMITER_CONFIG")
    if env:
        return Path(env)
    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        candidate = Path(xdg) / "keylimiter" / "limiter.yaml"
        if candidate.is_file():
            return candidate
    return None
