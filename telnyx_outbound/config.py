# telnyx_outbound/config.py
"""
Telnyx Options

Process-wide Telnyx settings, read once at startup. Values come from an
optional YAML file (with `${ENV_VAR}` references expanded) and fall back to
TELNYX_* environment variables.
"""

import os
import re
from dataclasses import dataclass
from pathlib import Path

import yaml
from dotenv import load_dotenv
from loguru import logger

from .exceptions import TelnyxConfigError

DEFAULT_API_URL = "https://api.telnyx.com/v2"


@dataclass(frozen=True)
class TelnyxOptions:
    """
    Telnyx settings shared by every activity in the process.

    Attributes:
        api_key: Telnyx API key (V2).
        api_url: Base URL of the Telnyx V2 API.
        call_control_app_id: Call Control App ID used when an activity does not specify one.
    """

    api_key: str = ""
    api_url: str = DEFAULT_API_URL
    call_control_app_id: str | None = None


def _expand_env_vars(obj):
    """
    Recursively expand environment variables in a configuration object.

    Strings in the format `${VAR_NAME}` are replaced with the value of the
    environment variable `VAR_NAME`; unknown variables are left as-is.
    """
    if isinstance(obj, str):
        return re.sub(
            r"\$\{(\w+)\}",
            lambda m: os.environ.get(m.group(1), m.group(0)),
            obj,
        )
    elif isinstance(obj, dict):
        return {k: _expand_env_vars(v) for k, v in obj.items()}
    elif isinstance(obj, list):
        return [_expand_env_vars(v) for v in obj]
    return obj


def _load_yaml(path: str | Path) -> dict:
    with open(path) as f:
        config = yaml.safe_load(f) or {}
    return _expand_env_vars(config)


def load_options(path: str | Path | None = None) -> TelnyxOptions:
    """
    Build the process-wide TelnyxOptions.

    Args:
        path: Optional YAML file with a top-level `telnyx` section.

    Returns:
        TelnyxOptions: The resolved options.
    """
    load_dotenv(".env.local")

    section = {}
    if path is not None:
        config = _load_yaml(path)
        if not isinstance(config, dict):
            raise TelnyxConfigError(f"{path}: expected a mapping at the top level")
        section = config.get("telnyx") or {}
        if not isinstance(section, dict):
            raise TelnyxConfigError(f"{path}: the 'telnyx' section must be a mapping")

    options = TelnyxOptions(
        api_key=section.get("api_key") or os.environ.get("TELNYX_API_KEY", ""),
        api_url=section.get("api_url") or os.environ.get("TELNYX_API_URL", DEFAULT_API_URL),
        call_control_app_id=(
            section.get("call_control_app_id") or os.environ.get("TELNYX_CALL_CONTROL_APP_ID") or None
        ),
    )

    if not options.api_key:
        logger.warning("No Telnyx API key configured")
    if options.call_control_app_id is None:
        logger.info("No default Call Control App ID configured")
    return options
