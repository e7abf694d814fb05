"""Runtime configuration: YAML file, Go environment variables and CLI overrides.

Precedence, highest first: CLI flags, environment, YAML config, defaults in
``Constants``. Values are applied onto ``Constants`` once at start-up.
"""

from __future__ import annotations

import logging
import os
from typing import Any, Dict, Mapping, Optional

import yaml

from constants import Constants
from versioning.errors import InputError

logger = logging.getLogger(__name__)


def load_config(config_path: Optional[str]) -> Dict[str, Any]:
    """Load configuration from a YAML file.

    Args:
        config_path: Path to YAML config file.

    Returns:
        Configuration dict (empty when no path is given).

    Raises:
        InputError: the file is missing or is not a YAML mapping.
    """
    if not config_path:
        return {}
    if not os.path.isfile(config_path):
        raise InputError(f"config file not found: {config_path}")
    with open(config_path, "r", encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as exc:
            raise InputError(f"invalid config file {config_path}: {exc}") from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise InputError(f"invalid config file {config_path}: expected a mapping")
    return data


def _int_setting(key: str, value: Any) -> int:
    if isinstance(value, bool):
        raise InputError(f"invalid config value for {key}: {value!r}")
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise InputError(f"invalid config value for {key}: {value!r}") from exc


def apply_config(cfg: Mapping[str, Any]) -> None:
    """Apply YAML config values onto Constants.

    Raises:
        InputError: a key holds a value of the wrong shape.
    """
    if cfg.get("proxy"):
        if not isinstance(cfg["proxy"], str):
            raise InputError(f"invalid config value for proxy: {cfg['proxy']!r}")
        Constants.PROXY_URL = cfg["proxy"].rstrip("/")
    if cfg.get("private") is not None:
        private = cfg["private"]
        if isinstance(private, (list, tuple)):
            private = ",".join(str(p) for p in private)
        elif not isinstance(private, str):
            raise InputError(f"invalid config value for private: {private!r}")
        Constants.PRIVATE_PATTERNS = private
    if cfg.get("timeout") is not None:
        Constants.REQUEST_TIMEOUT = _int_setting("timeout", cfg["timeout"])
    listing = cfg.get("list") or {}
    if not isinstance(listing, Mapping):
        raise InputError(f"invalid config value for list: expected a mapping, got {listing!r}")
    if listing.get("cached_concurrency") is not None:
        Constants.LIST_CONCURRENCY_CACHED = max(
            1, _int_setting("list.cached_concurrency", listing["cached_concurrency"]))
    if listing.get("uncached_concurrency") is not None:
        Constants.LIST_CONCURRENCY_UNCACHED = max(
            1, _int_setting("list.uncached_concurrency", listing["uncached_concurrency"]))


def proxy_from_env(value: str) -> Optional[str]:
    """Pick the module proxy URL out of a GOPROXY value.

    Returns None when no HTTP proxy is listed.

    Raises:
        InputError: GOPROXY disables the proxy ("off") before any usable entry.
    """
    for entry in value.replace("|", ",").split(","):
        entry = entry.strip()
        if not entry:
            continue
        if entry == "off":
            raise InputError("module lookup disabled by GOPROXY=off")
        if entry.startswith(("http://", "https://")):
            return entry.rstrip("/")
    return None


def apply_env_overrides(env: Optional[Mapping[str, str]] = None) -> None:
    """Apply GOPROXY / GONOPROXY / GOPRIVATE onto Constants."""
    if env is None:
        env = os.environ
    goproxy = env.get(Constants.ENV_GOPROXY)
    if goproxy:
        url = proxy_from_env(goproxy)
        if url:
            Constants.PROXY_URL = url
        else:
            logger.warning("No module proxy in GOPROXY=%s; using %s", goproxy, Constants.PROXY_URL)
    private = env.get(Constants.ENV_GONOPROXY) or env.get(Constants.ENV_GOPRIVATE)
    if private:
        Constants.PRIVATE_PATTERNS = private


def apply_cli_overrides(args) -> None:
    if getattr(args, "PROXY", None):
        Constants.PROXY_URL = str(args.PROXY).rstrip("/")


def configure(args, env: Optional[Mapping[str, str]] = None) -> None:
    """Apply every configuration layer in precedence order."""
    apply_config(load_config(getattr(args, "CONFIG", None)))
    apply_env_overrides(env)
    apply_cli_overrides(args)
    logger.debug("Using module proxy %s", Constants.PROXY_URL)
