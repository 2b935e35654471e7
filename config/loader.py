"""Typed settings lookup for the gateway

Lookup order for every name: process environment, then the dotenv file
(``GATEWAY_ENV_FILE`` or ``./.env``), then the default given by the caller.
"""

import logging
import os
from pathlib import Path
from typing import Any, Callable, List, Optional

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

_TRUE_VALUES = ("true", "1", "yes", "on")


def _parse_bool(raw: str) -> bool:
    return raw.strip().lower() in _TRUE_VALUES


class ConfigLoader:
    """Reads gateway settings and coerces them to the type of their default"""

    def __init__(self, env_path: Optional[str] = None):
        """
        Args:
            env_path: dotenv file to read; falls back to $GATEWAY_ENV_FILE, then ./.env
        """
        self.env_path = Path(env_path or os.getenv("GATEWAY_ENV_FILE") or ".env")
        # Values already in the environment win over the file
        self.env_file_loaded = self.env_path.is_file() and load_dotenv(self.env_path, override=False)
        if self.env_file_loaded:
            logger.debug(f"Gateway settings file read: {self.env_path}")

    def _parser_for(self, default: Any) -> Optional[Callable[[str], Any]]:
        # bool first: it is a subclass of int
        for kind, parser in ((bool, _parse_bool), (int, int), (float, float)):
            if isinstance(default, kind):
                return parser
        return None

    def get(self, env_var: str, default: Any) -> Any:
        """Value of ``env_var``, or ``default`` when unset, empty or unparsable"""
        raw = os.getenv(env_var)
        if not raw:
            return default

        parser = self._parser_for(default)
        if parser is None:
            return raw
        try:
            return parser(raw)
        except ValueError:
            logger.warning(f"Ignoring {env_var}={raw!r}: expected {type(default).__name__}, keeping {default!r}")
            return default

    def missing(self, *env_vars: str) -> List[str]:
        """Names from ``env_vars`` that have no non-empty value"""
        return [name for name in env_vars if not os.getenv(name)]


_loader: Optional[ConfigLoader] = None


def get_config_loader() -> ConfigLoader:
    """Process-wide loader, created on first use"""
    global _loader
    if _loader is None:
        _loader = ConfigLoader()
    return _loader
