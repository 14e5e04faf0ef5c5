"""
Configuration model and resolution for chanomhub-sdk.
"""
import os
from typing import Any, Dict, List, Mapping, Optional, Union

from dotenv import dotenv_values
from pydantic import BaseModel, SecretStr

# Constants
DEFAULT_API_URL = "https://api.chanomhub.online"
DEFAULT_CDN_URL = "https://cdn.chanomhub.com"
DEFAULT_CACHE_SECONDS = 3600

DEFAULT_CONFIG: Dict[str, Any] = {
    "api_url": DEFAULT_API_URL,
    "cdn_url": DEFAULT_CDN_URL,
    "token": None,
    "default_cache_seconds": DEFAULT_CACHE_SECONDS,
    "supabase_url": None,
    "supabase_anon_key": None,
    "timeout": None,
}

# Environment variables consulted by ClientConfig.from_env, in priority order
ENV_KEYS: Dict[str, List[str]] = {
    "api_url": ["CHANOMHUB_API_URL"],
    "cdn_url": ["CHANOMHUB_CDN_URL"],
    "token": ["CHANOMHUB_TOKEN"],
    "default_cache_seconds": ["CHANOMHUB_CACHE_SECONDS"],
    "supabase_url": ["SUPABASE_URL", "CHANOMHUB_SUPABASE_URL"],
    "supabase_anon_key": ["SUPABASE_ANON_KEY", "CHANOMHUB_SUPABASE_ANON_KEY"],
    "timeout": ["CHANOMHUB_TIMEOUT"],
}


class ClientConfig(BaseModel):
    """
    Immutable SDK configuration.

    A new client means a new config value; use `resolve_config` or
    `with_token` to derive one instead of mutating.
    """
    model_config = {"frozen": True, "extra": "forbid"}

    api_url: str = DEFAULT_API_URL
    cdn_url: str = DEFAULT_CDN_URL
    token: Optional[SecretStr] = None
    default_cache_seconds: int = DEFAULT_CACHE_SECONDS
    supabase_url: Optional[str] = None
    supabase_anon_key: Optional[SecretStr] = None
    # Seconds; None leaves httpx's own default in place
    timeout: Optional[float] = None

    @property
    def token_value(self) -> Optional[str]:
        """Raw bearer token, or None when unauthenticated."""
        if self.token is None:
            return None
        return self.token.get_secret_value() or None

    @property
    def is_oauth_enabled(self) -> bool:
        """Identity-provider features need both URL and anon key."""
        key = self.supabase_anon_key.get_secret_value() if self.supabase_anon_key else ""
        return bool(self.supabase_url and key)

    def with_token(self, token: Optional[str]) -> "ClientConfig":
        """Return a copy bound to a different bearer token."""
        return resolve_config(self, token=token)

    @classmethod
    def from_env(cls, env_file: Optional[str] = None, **overrides: Any) -> "ClientConfig":
        """
        Build a config from keyword arguments, then environment variables,
        then `env_file` (a .env file, if given), then defaults. The first
        non-None value wins; the process environment is never modified.
        """
        file_values: Mapping[str, Optional[str]] = dotenv_values(env_file) if env_file else {}

        values: Dict[str, Any] = {}
        for key, default in DEFAULT_CONFIG.items():
            values[key] = _resolve_env(overrides.pop(key, None), ENV_KEYS[key], file_values, default)
        if overrides:
            # Unknown keys are reported by pydantic
            values.update(overrides)

        values["default_cache_seconds"] = _to_int(
            values["default_cache_seconds"], DEFAULT_CACHE_SECONDS
        )
        if values["timeout"] in ("", None):
            values["timeout"] = None
        return cls(**values)


def _resolve_env(
    arg: Any, env_keys: List[str], file_values: Mapping[str, Optional[str]], default: Any
) -> Any:
    if arg is not None:
        return arg
    for key in env_keys:
        val = os.getenv(key)
        if val is not None:
            return val
    for key in env_keys:
        val = file_values.get(key)
        if val is not None:
            return val
    return default


def _to_int(val: Any, default: int) -> int:
    try:
        return int(val)
    except (ValueError, TypeError):
        return default


def resolve_config(
    overrides: Optional[Union[Mapping[str, Any], ClientConfig]] = None,
    **kwargs: Any,
) -> ClientConfig:
    """
    Shallow-merge overrides over DEFAULT_CONFIG and return a new config.

    `overrides` may be a mapping or an existing ClientConfig; keyword
    arguments win over both. URLs are not validated.
    """
    merged: Dict[str, Any] = dict(DEFAULT_CONFIG)
    if isinstance(overrides, ClientConfig):
        merged.update(_dump(overrides))
    elif overrides:
        merged.update(overrides)
    merged.update(kwargs)
    return ClientConfig(**merged)


def _dump(config: ClientConfig) -> Dict[str, Any]:
    """Field values with secrets unwrapped, suitable for re-validation."""
    data = {name: getattr(config, name) for name in ClientConfig.model_fields}
    for name, value in data.items():
        if isinstance(value, SecretStr):
            data[name] = value.get_secret_value()
    return data
