# =============================================================================
# greenmaster_core/config/settings.py
# Application Settings for GreenMaster
# =============================================================================
"""
Settings are resolved once at startup from Streamlit secrets, then environment
variables, then defaults.

Expected secrets.toml format:
    [supabase]
    url = "https://your-project.supabase.co"
    key = "your-anon-key"

    [ai]
    api_key = "your-api-key"
    base_url = "https://generativelanguage.googleapis.com/v1beta/openai/"
    model = "gemini-2.5-flash"
    fast_model = "gemini-2.5-flash-lite"

    [app]
    db_path = "local_data/greenmaster.db"
    refresh_seconds = 15
    log_level = "INFO"
"""

from __future__ import annotations
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from greenmaster_core.errors import ConfigurationError
from greenmaster_core.logging import get_logger

logger = get_logger(__name__)

DEFAULT_DB_PATH = Path(__file__).parent.parent.parent / "local_data" / "greenmaster.db"
DEFAULT_AI_MODEL = "gpt-4o-mini"
DEFAULT_AI_FAST_MODEL = "gpt-4o-mini"
DEFAULT_REFRESH_SECONDS = 15.0


@dataclass(frozen=True)
class AppSettings:
    """Resolved configuration for one process."""
    supabase_url: Optional[str] = None
    supabase_key: Optional[str] = None
    ai_api_key: Optional[str] = None
    ai_base_url: Optional[str] = None
    ai_model: str = DEFAULT_AI_MODEL
    ai_fast_model: str = DEFAULT_AI_FAST_MODEL
    db_path: Path = DEFAULT_DB_PATH
    refresh_seconds: float = DEFAULT_REFRESH_SECONDS
    log_level: str = "INFO"

    @property
    def remote_enabled(self) -> bool:
        """Remote document database is used only when fully configured."""
        return bool(self.supabase_url and self.supabase_key)

    @property
    def ai_enabled(self) -> bool:
        return bool(self.ai_api_key)


def _read_secrets() -> Dict[str, Dict[str, Any]]:
    """Return the secrets tables we care about, or {} when none are configured."""
    try:
        import streamlit as st

        secrets = {}
        for table in ("supabase", "ai", "app"):
            if table in st.secrets:
                secrets[table] = dict(st.secrets[table])
        return secrets
    except Exception:
        # No secrets.toml (or not running under Streamlit)
        return {}


def _pick(
    secrets: Mapping[str, Mapping[str, Any]],
    env: Mapping[str, str],
    table: str,
    key: str,
    *env_names: str,
) -> Optional[Any]:
    value = secrets.get(table, {}).get(key)
    if value not in (None, ""):
        return value
    for name in env_names:
        if env.get(name):
            return env[name]
    return None


def load_settings(
    secrets: Optional[Mapping[str, Mapping[str, Any]]] = None,
    env: Optional[Mapping[str, str]] = None,
) -> AppSettings:
    """
    Build AppSettings from secrets and environment.

    Args:
        secrets: Secrets tables (defaults to Streamlit secrets)
        env: Environment mapping (defaults to os.environ)

    Raises:
        ConfigurationError: if a numeric setting cannot be parsed
    """
    secrets = _read_secrets() if secrets is None else secrets
    env = os.environ if env is None else env

    refresh_raw = _pick(secrets, env, "app", "refresh_seconds", "GREENMASTER_REFRESH_SECONDS")
    refresh_seconds = DEFAULT_REFRESH_SECONDS
    if refresh_raw is not None:
        try:
            refresh_seconds = float(refresh_raw)
        except (TypeError, ValueError) as e:
            raise ConfigurationError(
                f"Invalid refresh interval: {refresh_raw!r}",
                config_key="refresh_seconds",
                expected_type="float",
            ) from e
        if refresh_seconds <= 0:
            raise ConfigurationError(
                "Refresh interval must be positive",
                config_key="refresh_seconds",
                expected_type="float > 0",
            )

    db_path = _pick(secrets, env, "app", "db_path", "GREENMASTER_DB_PATH")

    settings = AppSettings(
        supabase_url=_pick(secrets, env, "supabase", "url", "SUPABASE_URL"),
        supabase_key=_pick(secrets, env, "supabase", "key", "SUPABASE_KEY"),
        ai_api_key=_pick(secrets, env, "ai", "api_key", "GREENMASTER_AI_API_KEY", "OPENAI_API_KEY"),
        ai_base_url=_pick(secrets, env, "ai", "base_url", "GREENMASTER_AI_BASE_URL"),
        ai_model=_pick(secrets, env, "ai", "model", "GREENMASTER_AI_MODEL") or DEFAULT_AI_MODEL,
        ai_fast_model=(
            _pick(secrets, env, "ai", "fast_model", "GREENMASTER_AI_FAST_MODEL")
            or DEFAULT_AI_FAST_MODEL
        ),
        db_path=Path(db_path).expanduser() if db_path else DEFAULT_DB_PATH,
        refresh_seconds=refresh_seconds,
        log_level=str(_pick(secrets, env, "app", "log_level", "GREENMASTER_LOG_LEVEL") or "INFO"),
    )

    logger.debug(
        "Settings loaded (remote=%s, ai=%s, db=%s)",
        settings.remote_enabled, settings.ai_enabled, settings.db_path,
    )
    return settings
