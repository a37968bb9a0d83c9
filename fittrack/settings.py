"""FitTrack - 统一配置读取与校验.

目标:
- 将环境变量读取、默认值、校验集中到单一入口,避免散落在各模块中重复解析.
- `create_app(settings=...)` 与 `AppStore.create(settings=...)` 只消费配置对象,不再直接读取环境变量.

说明:
- 使用 `pydantic-settings` 的 `BaseSettings` 从环境变量与本地 `.env`(可选)读取配置.
- 生产环境默认更严格: 缺失关键密钥/连接串会直接抛出 ValueError.
"""

from __future__ import annotations

import json
import logging
import secrets
from pathlib import Path

from dotenv import load_dotenv
from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

PROJECT_ROOT = Path(__file__).resolve().parent.parent
DOTENV_PATH = PROJECT_ROOT / ".env"

DEFAULT_ENVIRONMENT = "development"
APP_NAME = "FitTrack"
APP_VERSION = "1.0.0"
DEFAULT_JWT_ACCESS_TOKEN_EXPIRES_SECONDS = 3600
DEFAULT_JWT_REFRESH_TOKEN_EXPIRES_SECONDS = 30 * 24 * 3600
DEFAULT_PASSWORD_RESET_TTL_SECONDS = 3600

DEFAULT_SQLALCHEMY_POOL_RECYCLE_SECONDS = 300
DEFAULT_BCRYPT_LOG_ROUNDS = 12
BCRYPT_LOG_ROUNDS_MIN = 4
DEFAULT_MAX_CONTENT_LENGTH_BYTES = 2 * 1024 * 1024
DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_CORS_ORIGINS = ("http://localhost:3000", "http://127.0.0.1:3000")

DEFAULT_API_BASE_URL = "http://127.0.0.1:5001/api"
DEFAULT_REQUEST_TIMEOUT_SECONDS = 15.0
DEFAULT_SEARCH_DEBOUNCE_SECONDS = 0.4
SEARCH_DEBOUNCE_MIN_SECONDS = 0.3
SEARCH_DEBOUNCE_MAX_SECONDS = 0.5
DEFAULT_ROWS_PER_PAGE = 10
DEFAULT_TOAST_HISTORY = 20
DEFAULT_LOGIN_PATH = "/login"


def _parse_csv(raw: str) -> tuple[str, ...]:
    parts = [item.strip() for item in raw.split(",")]
    return tuple(item for item in parts if item)


def _resolve_sqlite_fallback_url() -> str:
    db_path = PROJECT_ROOT / "userdata" / "fittrack_dev.db"
    return f"sqlite:///{db_path.absolute()}"


class Settings(BaseSettings):
    """服务端运行时设置集合."""

    model_config = SettingsConfigDict(
        env_ignore_empty=True,
        extra="ignore",
        frozen=True,
        str_strip_whitespace=True,
        # `CORS_ORIGINS` 约定使用逗号分隔,关闭自动 JSON 解码,交由 validator 解析.
        enable_decoding=False,
    )

    environment: str = Field(default=DEFAULT_ENVIRONMENT, validation_alias="FLASK_ENV")
    debug: bool = Field(default=False, validation_alias="FLASK_DEBUG")

    app_name: str = Field(default=APP_NAME, validation_alias="APP_NAME")
    app_version: str = APP_VERSION

    secret_key: str = Field(default="", validation_alias="SECRET_KEY")
    jwt_secret_key: str = Field(default="", validation_alias="JWT_SECRET_KEY")
    jwt_access_token_expires_seconds: int = Field(
        default=DEFAULT_JWT_ACCESS_TOKEN_EXPIRES_SECONDS,
        validation_alias="JWT_ACCESS_TOKEN_EXPIRES",
    )
    jwt_refresh_token_expires_seconds: int = Field(
        default=DEFAULT_JWT_REFRESH_TOKEN_EXPIRES_SECONDS,
        validation_alias="JWT_REFRESH_TOKEN_EXPIRES",
    )
    password_reset_ttl_seconds: int = Field(
        default=DEFAULT_PASSWORD_RESET_TTL_SECONDS,
        validation_alias="PASSWORD_RESET_TTL",
    )

    database_url: str = Field(default="", validation_alias="DATABASE_URL")
    bcrypt_log_rounds: int = Field(default=DEFAULT_BCRYPT_LOG_ROUNDS, validation_alias="BCRYPT_LOG_ROUNDS")
    max_content_length_bytes: int = Field(
        default=DEFAULT_MAX_CONTENT_LENGTH_BYTES,
        validation_alias="MAX_CONTENT_LENGTH",
    )
    log_level: str = Field(default=DEFAULT_LOG_LEVEL, validation_alias="LOG_LEVEL")
    cors_origins: tuple[str, ...] = Field(default=DEFAULT_CORS_ORIGINS, validation_alias="CORS_ORIGINS")

    @field_validator("log_level")
    @classmethod
    def _normalize_log_level(cls, value: str) -> str:
        return value.upper()

    @field_validator("cors_origins", mode="before")
    @classmethod
    def _parse_csv_values(cls, value: object) -> object:
        if value is None:
            return None
        if isinstance(value, str):
            raw = value.strip()
            if not raw:
                return ()
            if raw.startswith("["):
                parsed = json.loads(raw)
                if not isinstance(parsed, list):
                    raise ValueError("must be a JSON array or a comma-separated string")
                return tuple(item for item in (str(v).strip() for v in parsed) if item)
            return _parse_csv(raw)
        if isinstance(value, (list, tuple, set)):
            return tuple(text for text in (str(item).strip() for item in value) if text)
        return value

    @property
    def sqlalchemy_engine_options(self) -> dict[str, object]:
        """生成 SQLAlchemy Engine 配置选项."""
        if self.database_url.startswith("sqlite"):
            return {"pool_pre_ping": True, "connect_args": {"check_same_thread": False}}
        return {
            "pool_pre_ping": True,
            "pool_recycle": DEFAULT_SQLALCHEMY_POOL_RECYCLE_SECONDS,
            "echo": bool(self.debug),
        }

    def to_flask_config(self) -> dict[str, object]:
        """转换为 Flask app.config 可写入的配置字典."""
        return {
            "ENV": self.environment,
            "DEBUG": self.debug,
            "APP_NAME": self.app_name,
            "APP_VERSION": self.app_version,
            "SECRET_KEY": self.secret_key,
            "JWT_SECRET_KEY": self.jwt_secret_key,
            "JWT_ACCESS_TOKEN_EXPIRES": self.jwt_access_token_expires_seconds,
            "JWT_REFRESH_TOKEN_EXPIRES": self.jwt_refresh_token_expires_seconds,
            "PASSWORD_RESET_TTL": self.password_reset_ttl_seconds,
            "SQLALCHEMY_DATABASE_URI": self.database_url,
            "SQLALCHEMY_TRACK_MODIFICATIONS": False,
            "SQLALCHEMY_ENGINE_OPTIONS": dict(self.sqlalchemy_engine_options),
            "BCRYPT_LOG_ROUNDS": self.bcrypt_log_rounds,
            "MAX_CONTENT_LENGTH": self.max_content_length_bytes,
            "LOG_LEVEL": self.log_level,
            "CORS_ORIGINS": ",".join(self.cors_origins),
            "JSON_SORT_KEYS": False,
        }

    @classmethod
    def load(cls) -> Settings:
        """从环境变量加载 Settings 并执行必要校验."""
        load_dotenv(dotenv_path=DOTENV_PATH if DOTENV_PATH.exists() else None, override=False)
        return cls()

    @model_validator(mode="after")
    def _apply_defaults_and_validate(self) -> Settings:
        environment_normalized = self.environment.strip().lower()

        debug = self._resolve_debug(environment_normalized)
        self._ensure_secret_keys(debug)
        self._ensure_database_url(environment_normalized)

        self._validate()
        return self

    def _resolve_debug(self, environment_normalized: str) -> bool:
        if "debug" in self.model_fields_set:
            return bool(self.debug)
        debug = environment_normalized != "production"
        object.__setattr__(self, "debug", debug)
        return debug

    def _ensure_secret_keys(self, debug: bool) -> None:
        if not self.secret_key:
            if not debug:
                raise ValueError("SECRET_KEY environment variable must be set in production")
            object.__setattr__(self, "secret_key", secrets.token_urlsafe(32))
            logger.warning("⚠️  开发环境使用随机生成的SECRET_KEY,生产环境请设置环境变量")

        if not self.jwt_secret_key:
            if not debug:
                raise ValueError("JWT_SECRET_KEY environment variable must be set in production")
            object.__setattr__(self, "jwt_secret_key", secrets.token_urlsafe(32))
            logger.warning("⚠️  开发环境使用随机生成的JWT_SECRET_KEY,生产环境请设置环境变量")

    def _ensure_database_url(self, environment_normalized: str) -> None:
        if self.database_url:
            return
        if environment_normalized == "production":
            raise ValueError("DATABASE_URL environment variable must be set in production")

        object.__setattr__(self, "database_url", _resolve_sqlite_fallback_url())
        if environment_normalized not in {"testing", "test"}:
            logger.warning("⚠️  未设置 DATABASE_URL, 非 production 环境将回退 SQLite")

    def _validate(self) -> None:
        """执行跨字段校验,统一抛出可读的 ValueError."""
        checks: list[tuple[str, bool]] = [
            ("JWT_ACCESS_TOKEN_EXPIRES 必须为正整数(秒)", self.jwt_access_token_expires_seconds <= 0),
            ("JWT_REFRESH_TOKEN_EXPIRES 必须为正整数(秒)", self.jwt_refresh_token_expires_seconds <= 0),
            ("PASSWORD_RESET_TTL 必须为正整数(秒)", self.password_reset_ttl_seconds <= 0),
            (f"BCRYPT_LOG_ROUNDS 不应小于 {BCRYPT_LOG_ROUNDS_MIN}", self.bcrypt_log_rounds < BCRYPT_LOG_ROUNDS_MIN),
            ("MAX_CONTENT_LENGTH 必须为正整数", self.max_content_length_bytes <= 0),
            (
                "LOG_LEVEL 仅支持 DEBUG/INFO/WARNING/ERROR/CRITICAL",
                self.log_level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"},
            ),
        ]
        errors = [message for message, condition in checks if condition]
        if errors:
            joined = "; ".join(errors)
            raise ValueError(f"配置校验失败: {joined}")


class ClientSettings(BaseSettings):
    """客户端状态层设置集合.

    所有环境变量统一使用 ``FITTRACK_`` 前缀,例如 ``FITTRACK_API_BASE_URL``.
    """

    model_config = SettingsConfigDict(
        env_prefix="FITTRACK_",
        env_ignore_empty=True,
        extra="ignore",
        frozen=True,
        str_strip_whitespace=True,
    )

    api_base_url: str = DEFAULT_API_BASE_URL
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT_SECONDS
    search_debounce: float = DEFAULT_SEARCH_DEBOUNCE_SECONDS
    rows_per_page: int = DEFAULT_ROWS_PER_PAGE
    toast_history: int = DEFAULT_TOAST_HISTORY
    login_path: str = DEFAULT_LOGIN_PATH

    @field_validator("api_base_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    @field_validator("search_debounce")
    @classmethod
    def _validate_debounce(cls, value: float) -> float:
        if not SEARCH_DEBOUNCE_MIN_SECONDS <= value <= SEARCH_DEBOUNCE_MAX_SECONDS:
            msg = f"SEARCH_DEBOUNCE 必须在 {SEARCH_DEBOUNCE_MIN_SECONDS}-{SEARCH_DEBOUNCE_MAX_SECONDS} 秒之间"
            raise ValueError(msg)
        return value

    @field_validator("request_timeout")
    @classmethod
    def _validate_timeout(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("REQUEST_TIMEOUT 必须为正数(秒)")
        return value

    @field_validator("rows_per_page", "toast_history")
    @classmethod
    def _validate_positive(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("必须为正整数")
        return value

    @classmethod
    def load(cls) -> ClientSettings:
        """从环境变量加载 ClientSettings."""
        load_dotenv(dotenv_path=DOTENV_PATH if DOTENV_PATH.exists() else None, override=False)
        return cls()
