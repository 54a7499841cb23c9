"""
Configuration management with schema validation.
Settings come from an optional YAML file and the process environment (.env supported).
"""

import os
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError as PydanticValidationError, field_validator

from .exceptions import ConfigError


class AppSettings(BaseModel):
    name: str = "AuthGate"
    version: str = "0.1.0"
    environment: str = "development"


class ServerSettings(BaseModel):
    host: str = "127.0.0.1"
    port: int = 8080
    cors_origins: List[str] = Field(default_factory=list)

    @field_validator("cors_origins", mode="before")
    @classmethod
    def _split_origins(cls, v: Any) -> Any:
        if isinstance(v, str):
            return [o.strip() for o in v.split(",") if o.strip()]
        return v or []


class ProviderSettings(BaseModel):
    """Identity provider (Supabase-compatible auth API) settings"""
    url: str
    anon_key: str
    project_id: str = ""
    service_role: str = ""
    timeout: float = 30.0
    connect_timeout: float = 10.0
    retry_attempts: int = Field(default=3, ge=1)

    @field_validator("url")
    @classmethod
    def _strip_slash(cls, v: str) -> str:
        return v.rstrip("/")


class CookieSettings(BaseModel):
    name: str = "session_id"
    secure: bool = False


class SessionSettings(BaseModel):
    file_path: str = "data/sessions.csv"
    enforce_expiry: bool = False


class LoggingSettings(BaseModel):
    level: str = "INFO"
    format: str = "console"
    file_path: Optional[str] = None
    max_bytes: int = 10485760
    backup_count: int = 5


class Settings(BaseModel):
    app: AppSettings = Field(default_factory=AppSettings)
    server: ServerSettings = Field(default_factory=ServerSettings)
    provider: ProviderSettings
    cookies: CookieSettings = Field(default_factory=CookieSettings)
    sessions: SessionSettings = Field(default_factory=SessionSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


# Environment variable -> (section, field)
ENV_MAP = {
    "APP_ENV": ("app", "environment"),
    "IP": ("server", "host"),
    "PORT": ("server", "port"),
    "CORS_ORIGINS": ("server", "cors_origins"),
    "SP_ID": ("provider", "project_id"),
    "SP_URL": ("provider", "url"),
    "SP_ANON": ("provider", "anon_key"),
    "SP_SERVICE_ROLE": ("provider", "service_role"),
    "PROVIDER_TIMEOUT": ("provider", "timeout"),
    "PROVIDER_CONNECT_TIMEOUT": ("provider", "connect_timeout"),
    "PROVIDER_RETRY_ATTEMPTS": ("provider", "retry_attempts"),
    "SESSION_COOKIE_NAME": ("cookies", "name"),
    "SECURE_HTTP": ("cookies", "secure"),
    "SESSION_FILE": ("sessions", "file_path"),
    "ENFORCE_TOKEN_EXPIRY": ("sessions", "enforce_expiry"),
    "LOG_LEVEL": ("logging", "level"),
    "LOG_FORMAT": ("logging", "format"),
    "LOG_FILE": ("logging", "file_path"),
}


class ConfigManager:
    """Loads and validates AuthGate settings"""

    def __init__(self, settings_path: Optional[str] = None, environ: Optional[Mapping[str, str]] = None):
        self._environ = environ
        path = settings_path if settings_path is not None else self._env().get("AUTHGATE_SETTINGS")
        self.settings_path = Path(path) if path else None
        self._settings: Optional[Settings] = None

    def _env(self) -> Mapping[str, str]:
        return self._environ if self._environ is not None else os.environ

    def _substitute_env_vars(self, value: Any) -> Any:
        """Recursively substitute ${VAR} and ${VAR:default} references"""
        env = self._env()
        if isinstance(value, str):
            if value.startswith("${") and value.endswith("}"):
                var_expr = value[2:-1]
                if ":" in var_expr:
                    var_name, default = var_expr.split(":", 1)
                    return env.get(var_name.strip(), default.strip())
                if var_expr not in env:
                    raise ConfigError(f"Environment variable {var_expr} not found")
                return env[var_expr]
        elif isinstance(value, dict):
            return {k: self._substitute_env_vars(v) for k, v in value.items()}
        elif isinstance(value, list):
            return [self._substitute_env_vars(item) for item in value]
        return value

    def _load_yaml(self) -> Dict[str, Any]:
        if self.settings_path is None:
            return {}
        if not self.settings_path.exists():
            raise ConfigError(f"Settings file not found: {self.settings_path}")
        try:
            with open(self.settings_path, "r", encoding="utf-8") as f:
                raw = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid settings file {self.settings_path}: {e}")
        if not isinstance(raw, dict):
            raise ConfigError(f"Settings file {self.settings_path} must contain a mapping")
        return self._substitute_env_vars(raw)

    def load_settings(self) -> Settings:
        """Merge YAML settings with environment overrides and validate"""
        if self._environ is None:
            load_dotenv()

        data = self._load_yaml()
        env = self._env()
        for var, (section, field) in ENV_MAP.items():
            value = env.get(var)
            if value is None or value == "":
                continue
            data.setdefault(section, {})
            data[section][field] = value

        if not data.get("provider", {}).get("url"):
            raise ConfigError("SP_URL must be set (environment or settings file)")
        if not data.get("provider", {}).get("anon_key"):
            raise ConfigError("SP_ANON must be set (environment or settings file)")

        try:
            self._settings = Settings(**data)
        except PydanticValidationError as e:
            raise ConfigError(f"Invalid configuration: {e}")
        return self._settings

    @property
    def settings(self) -> Settings:
        if self._settings is None:
            return self.load_settings()
        return self._settings
