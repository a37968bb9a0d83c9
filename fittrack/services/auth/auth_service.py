"""认证 Service.

职责:
- 负责注册、邮箱/密码认证、令牌刷新与密码重置流程
- 负责生成登录响应数据(JWT)
- 不返回 Response、不 commit
"""

from __future__ import annotations

import secrets
from dataclasses import dataclass

from flask import current_app
from flask_jwt_extended import create_access_token, create_refresh_token
from sqlalchemy.exc import IntegrityError

from fittrack import db
from fittrack.constants import HttpStatus
from fittrack.constants.system_constants import ErrorMessages
from fittrack.errors import AuthenticationError, ValidationError
from fittrack.models.user import PROFILE_FIELDS, User
from fittrack.repositories.users_repository import UsersRepository
from fittrack.schemas.auth import ForgetPasswordPayload, LoginPayload, RegisterPayload, ResetPasswordPayload
from fittrack.schemas.validation import validate_or_raise
from fittrack.settings import DEFAULT_PASSWORD_RESET_TTL_SECONDS
from fittrack.types import JsonDict
from fittrack.utils.structlog_config import get_auth_logger
from fittrack.utils.time_utils import time_utils

RESET_TOKEN_BYTES = 20


@dataclass(frozen=True, slots=True)
class LoginResult:
    """登录结果(供 API 层封套返回)."""

    access_token: str
    refresh_token: str
    user: JsonDict

    def to_payload(self) -> JsonDict:
        """转换为可 JSON 序列化的 payload."""
        return {
            "token": self.access_token,
            "refreshToken": self.refresh_token,
            "user": self.user,
        }


class AuthService:
    """认证编排服务."""

    def __init__(self, repository: UsersRepository | None = None) -> None:
        self._repository = repository or UsersRepository()
        self._logger = get_auth_logger()

    # ------------------------------------------------------------------ #
    # 注册 / 登录
    # ------------------------------------------------------------------ #
    def register_from_payload(self, payload: object | None) -> JsonDict:
        """注册新用户并返回访问令牌.

        Args:
            payload: 原始请求体.

        Returns:
            ``{"token": <access token>}``.

        Raises:
            ValidationError: 字段缺失、格式错误或邮箱已被注册.

        """
        parsed = validate_or_raise(RegisterPayload, payload or {})
        if self._repository.get_by_email(parsed.email) is not None:
            raise ValidationError(ErrorMessages.EMAIL_EXISTS, message_key="EMAIL_EXISTS")

        user = User(
            username=parsed.username,
            email=parsed.email,
            profile={key: value for key, value in parsed.profile.items() if key in PROFILE_FIELDS},
            fitness_goals=[],
        )
        user.set_password(parsed.password)
        try:
            self._repository.add(user)
        except IntegrityError as exc:
            db.session.rollback()
            raise ValidationError(ErrorMessages.EMAIL_EXISTS, message_key="EMAIL_EXISTS") from exc

        self._logger.info("用户注册成功", module="auth", user_id=user.id, email=user.email)
        return {"token": create_access_token(identity=str(user.id))}

    def authenticate(self, *, email: str, password: str) -> User | None:
        """认证邮箱与密码.

        Returns:
            认证成功返回 User,否则返回 None.

        """
        user = self._repository.get_by_email(email)
        if user and user.check_password(password):
            return user
        return None

    def login_from_payload(self, payload: object | None) -> LoginResult:
        """从原始 payload 解析并执行登录."""
        parsed = validate_or_raise(LoginPayload, payload or {})
        return self.login(email=parsed.email, password=parsed.password)

    def login(self, *, email: str, password: str) -> LoginResult:
        """登录入口: 认证并构造登录结果.

        Raises:
            AuthenticationError: 邮箱或密码错误时抛出,沿用原有约定返回 400.

        """
        user = self.authenticate(email=email, password=password)
        if not user:
            self._logger.warning("登录失败:邮箱或密码错误", module="auth", email=email)
            raise AuthenticationError(
                ErrorMessages.INVALID_CREDENTIALS,
                message_key="INVALID_CREDENTIALS",
                status_code=HttpStatus.BAD_REQUEST,
            )

        self._logger.info("用户登录成功", module="auth", user_id=user.id)
        return LoginResult(
            access_token=create_access_token(identity=str(user.id)),
            refresh_token=create_refresh_token(identity=str(user.id)),
            user=user.to_dict(),
        )

    @staticmethod
    def refresh(identity: str) -> JsonDict:
        """使用刷新令牌身份签发新的访问令牌."""
        return {"token": create_access_token(identity=str(identity))}

    # ------------------------------------------------------------------ #
    # 密码重置
    # ------------------------------------------------------------------ #
    def forget_password_from_payload(self, payload: object | None) -> str:
        """签发重置令牌.

        未接入邮件发送,令牌写入认证日志供运维转交.

        Returns:
            新签发的重置令牌.

        Raises:
            ValidationError: 邮箱缺失或不存在对应用户.

        """
        parsed = validate_or_raise(ForgetPasswordPayload, payload or {})
        user = self._repository.get_by_email(parsed.email)
        if user is None:
            raise ValidationError(ErrorMessages.EMAIL_NOT_FOUND, message_key="EMAIL_NOT_FOUND")

        ttl_seconds = int(current_app.config.get("PASSWORD_RESET_TTL", DEFAULT_PASSWORD_RESET_TTL_SECONDS))
        token = secrets.token_hex(RESET_TOKEN_BYTES)
        user.reset_password_token = token
        user.reset_password_expires = time_utils.expires_in(ttl_seconds)
        db.session.flush()

        self._logger.info(
            "已签发密码重置令牌",
            module="auth",
            user_id=user.id,
            reset_token=token,
            expires_at=time_utils.to_json_timestamp(user.reset_password_expires),
        )
        return token

    def reset_password_from_payload(self, token: str, payload: object | None) -> None:
        """使用重置令牌设置新密码.

        Raises:
            ValidationError: 新密码不合法,或令牌无效/已过期.

        """
        parsed = validate_or_raise(ResetPasswordPayload, payload or {})
        user = self._repository.get_by_reset_token(token)
        if user is None or time_utils.is_expired(user.reset_password_expires):
            raise ValidationError(ErrorMessages.RESET_TOKEN_INVALID, message_key="RESET_TOKEN_INVALID")

        user.set_password(parsed.password)
        user.clear_reset_token()
        db.session.flush()
        self._logger.info("密码重置成功", module="auth", user_id=user.id)
