# SPDX-License-Identifier: MIT
# ghdeploy/config.py
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Optional

__all__ = ["Settings", "DEFAULT_BRANCH", "DEFAULT_USER_AGENT", "configure_logger", "short_path"]

DEFAULT_BRANCH = "main"
DEFAULT_USER_AGENT = "github-deploy/0.1 (+python-httpx)"

_TRUTHY = ("1", "true", "yes", "on")


def _env_timeout(raw: Optional[str]) -> Optional[float]:
    """
    Parse GHDEPLOY_HTTP_TIMEOUT. Unset, empty, "0" or "none" mean no timeout.
    """
    s = (raw or "").strip().lower()
    if not s or s in ("0", "none", "off"):
        return None
    try:
        value = float(s)
    except ValueError as e:
        raise ValueError(f"GHDEPLOY_HTTP_TIMEOUT must be a number of seconds, got {raw!r}") from e
    return value if value > 0 else None


@dataclass(frozen=True)
class Settings:
    """Runtime knobs for a deploy. Defaults match a long-running admin action."""

    user_agent: str = DEFAULT_USER_AGENT
    timeout: Optional[float] = None
    default_branch: str = DEFAULT_BRANCH
    tmp_dir: Optional[str] = None

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            user_agent=(os.getenv("GHDEPLOY_USER_AGENT") or "").strip() or DEFAULT_USER_AGENT,
            timeout=_env_timeout(os.getenv("GHDEPLOY_HTTP_TIMEOUT")),
            default_branch=(os.getenv("GHDEPLOY_DEFAULT_BRANCH") or "").strip() or DEFAULT_BRANCH,
            tmp_dir=(os.getenv("GHDEPLOY_TMPDIR") or "").strip() or None,
        )


def short_path(path: os.PathLike[str] | str, maxlen: int = 120) -> str:
    """Trim long paths from the left for log lines."""
    s = str(path)
    return s if len(s) <= maxlen else ("…" + s[-(maxlen - 1) :])


# --------------------------------------------------------------------------------------
# Logging (library-safe): module loggers only get a handler if GHDEPLOY_DEBUG=1
# --------------------------------------------------------------------------------------
def configure_logger(name: str) -> logging.Logger:
    """
    Return the `ghdeploy.<name>` logger, attaching a stderr handler at DEBUG
    when GHDEPLOY_DEBUG is truthy. Otherwise the logger is left to the host app.
    """
    logger = logging.getLogger(f"ghdeploy.{name}")
    dbg = (os.getenv("GHDEPLOY_DEBUG") or "").strip().lower()
    if dbg in _TRUTHY:
        if not logger.handlers:
            handler = logging.StreamHandler()
            handler.setFormatter(
                logging.Formatter(f"[ghdeploy][{name}] %(levelname)s: %(message)s")
            )
            logger.addHandler(handler)
        logger.setLevel(logging.DEBUG)
    return logger
