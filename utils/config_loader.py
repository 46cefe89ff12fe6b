"""Configuration loader: JSON config file + .env overrides, validated with Pydantic."""

import json
import os
import sys
from pathlib import Path
from typing import Any, Optional, Union
from dotenv import load_dotenv
from pydantic import ValidationError

from models.config_models import Config

PROJECT_ROOT = Path(__file__).parent.parent
DEFAULT_CONFIG_PATH = PROJECT_ROOT / "config" / "config.json"


def _read_config_file(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"{path} must contain a JSON object")
    return data


def _fail(lines: list[str]) -> None:
    print("❌ Configuration validation failed:", file=sys.stderr)
    for line in lines:
        print(f"  • {line}", file=sys.stderr)
    print("\nHint: Copy config.example.json to config/config.json and fill in your accounts.", file=sys.stderr)
    sys.exit(1)


def load_config(config_path: Optional[Union[str, Path]] = None) -> Config:
    """
    Load and validate configuration.

    Values come from the JSON config file (camelCase keys, as in
    config.example.json) and are overridden by environment variables, which
    may also be set in a .env file in the project root:

    - GITHUB_API_URL: API base URL (apiBaseUrl)
    - GITHUB_TOKEN: access token (token)
    - DASHBOARD_USERS: comma-separated account names (users)
    - DASHBOARD_CONFIG: path of the JSON config file
    - LOG_LEVEL

    Args:
        config_path: Explicit path of the JSON config file (optional)

    Returns:
        Config: Validated configuration object

    Raises:
        SystemExit: If the file is unreadable or the configuration is invalid
    """
    load_dotenv(dotenv_path=PROJECT_ROOT / ".env")

    path = Path(config_path or os.getenv("DASHBOARD_CONFIG") or DEFAULT_CONFIG_PATH)
    try:
        raw = _read_config_file(path)
    except (OSError, ValueError) as e:
        _fail([f"{path}: {e}"])

    github = {
        "apiBaseUrl": os.getenv("GITHUB_API_URL") or raw.get("apiBaseUrl", ""),
        "token": os.getenv("GITHUB_TOKEN") or raw.get("token"),
    }
    if "requestTimeout" in raw:
        github["requestTimeout"] = raw["requestTimeout"]

    dashboard = {
        key: raw[key]
        for key in ("users", "repos", "comments", "reactions", "groupByRepo", "maxConcurrency")
        if key in raw
    }
    users_env = os.getenv("DASHBOARD_USERS")
    if users_env:
        dashboard["users"] = [user.strip() for user in users_env.split(",") if user.strip()]

    try:
        return Config(
            github=github,
            dashboard=dashboard,
            log_level=os.getenv("LOG_LEVEL") or raw.get("logLevel", "INFO"),
        )
    except ValidationError as e:
        _fail([
            f"{' → '.join(str(x) for x in error['loc'])}: {error['msg']}"
            for error in e.errors()
        ])
