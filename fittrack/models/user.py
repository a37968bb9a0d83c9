"""FitTrack - 用户模型."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fittrack import bcrypt, db
from fittrack.utils.time_utils import time_utils

if TYPE_CHECKING:
    from fittrack.types import JsonDict

PROFILE_FIELDS: tuple[str, ...] = ("firstName", "lastName", "dob", "age", "gender", "height", "weight")


class User(db.Model):
    """用户模型.

    管理账户凭据、个人资料与健身目标.资料与目标以 JSON 保存,
    对外序列化时保持客户端使用的 camelCase 字段名.

    Attributes:
        id: 用户 ID,主键.
        username: 用户名.
        email: 登录邮箱,唯一索引.
        password_hash: 加密后的密码(bcrypt).
        profile: 个人资料字典.
        fitness_goals: 健身目标列表.
        reset_password_token: 重置密码令牌.
        reset_password_expires: 重置密码令牌过期时间.
        created_at: 创建时间.
        updated_at: 更新时间.

    """

    __tablename__ = "users"

    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(255), nullable=False)
    email = db.Column(db.String(255), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(255), nullable=False)
    profile = db.Column(db.JSON, nullable=False, default=dict)
    fitness_goals = db.Column(db.JSON, nullable=False, default=list)
    reset_password_token = db.Column(db.String(128), nullable=True, index=True)
    reset_password_expires = db.Column(db.DateTime(timezone=True), nullable=True)
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=time_utils.now)
    updated_at = db.Column(db.DateTime(timezone=True), nullable=False, default=time_utils.now, onupdate=time_utils.now)

    def set_password(self, password: str) -> None:
        """设置密码(加密).

        Args:
            password: 原始密码.

        """
        self.password_hash = bcrypt.generate_password_hash(password).decode("utf-8")

    def check_password(self, password: str) -> bool:
        """验证密码."""
        if not self.password_hash:
            return False
        return bcrypt.check_password_hash(self.password_hash, password)

    def clear_reset_token(self) -> None:
        """清除重置密码令牌."""
        self.reset_password_token = None
        self.reset_password_expires = None

    def to_dict(self) -> JsonDict:
        """转换为对外字典,不包含密码与重置令牌.

        Returns:
            用户信息字典.

        """
        return {
            "_id": str(self.id),
            "username": self.username,
            "email": self.email,
            "profile": dict(self.profile or {}),
            "fitnessGoals": list(self.fitness_goals or []),
            "createdAt": time_utils.to_json_timestamp(self.created_at),
            "updatedAt": time_utils.to_json_timestamp(self.updated_at),
        }

    def __repr__(self) -> str:
        return f"<User {self.email}>"
