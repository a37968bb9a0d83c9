"""个人资料 Service.

职责:
- 读取当前用户资料、局部更新资料与健身目标
- 列出全部用户
- 不返回 Response、不 commit
"""

from __future__ import annotations

from fittrack import db
from fittrack.constants.system_constants import ErrorMessages
from fittrack.errors import NotFoundError
from fittrack.models.user import User
from fittrack.repositories.users_repository import UsersRepository
from fittrack.schemas.users import ProfileUpdatePayload
from fittrack.schemas.validation import validate_or_raise
from fittrack.types import JsonDict
from fittrack.utils.structlog_config import log_info


class ProfileService:
    """个人资料读写服务."""

    def __init__(self, repository: UsersRepository | None = None) -> None:
        self._repository = repository or UsersRepository()

    def _load(self, identity: str) -> User:
        try:
            user_id = int(identity)
        except (TypeError, ValueError):
            raise NotFoundError(ErrorMessages.USER_NOT_FOUND, message_key="USER_NOT_FOUND") from None
        user = self._repository.get_by_id(user_id)
        if user is None:
            raise NotFoundError(ErrorMessages.USER_NOT_FOUND, message_key="USER_NOT_FOUND")
        return user

    def get_profile(self, identity: str) -> JsonDict:
        """返回当前用户的资料字典."""
        return self._load(identity).to_dict()

    def update_profile(self, identity: str, payload: object | None) -> JsonDict:
        """局部更新资料.

        只覆盖请求中显式给出的资料字段;提供 ``fitnessGoals`` 时整体替换目标列表.

        Args:
            identity: JWT 身份(用户 ID 字符串).
            payload: 原始请求体.

        Returns:
            更新后的用户字典.

        Raises:
            NotFoundError: 用户不存在.
            ValidationError: 字段类型或取值非法.

        """
        user = self._load(identity)
        parsed = validate_or_raise(ProfileUpdatePayload, payload or {})

        changes = parsed.profile_changes()
        if changes:
            profile = dict(user.profile or {})
            profile.update(changes)
            user.profile = profile

        goals = parsed.goals_changes()
        if goals is not None:
            user.fitness_goals = goals

        db.session.flush()
        log_info(
            "用户资料已更新",
            module="users",
            user_id=user.id,
            profile_fields=sorted(changes),
            goals_updated=goals is not None,
        )
        return user.to_dict()

    def list_users(self) -> list[JsonDict]:
        """列出全部用户(不含密码)."""
        return [user.to_dict() for user in self._repository.list_users()]
