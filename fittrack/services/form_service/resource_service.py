"""通用资源表单服务基类.

---------------------------------
负责封装表单校验、模型赋值、数据库写入与统一的结果返回.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Generic, TypeVar

from sqlalchemy.exc import SQLAlchemyError

from fittrack import db
from fittrack.types import MutablePayloadDict, PayloadMapping
from fittrack.utils.structlog_config import log_error

ResultT = TypeVar("ResultT")
ResourceT = TypeVar("ResourceT")


@dataclass(slots=True)
class ServiceResult(Generic[ResultT]):
    """统一的服务层返回结构.

    用于封装服务层操作的结果,包含成功状态、数据、消息和额外信息.

    Attributes:
        success: 操作是否成功.
        data: 返回的数据对象,失败时为 None.
        message: 返回消息,失败时直接作为对外错误文案.
        message_key: 消息键.
        extra: 额外信息字典,例如字段级错误.

    """

    success: bool
    data: ResultT | None = None
    message: str | None = None
    message_key: str | None = None
    extra: MutablePayloadDict = field(default_factory=dict)

    @classmethod
    def ok(cls, data: ResultT, message: str | None = None) -> ServiceResult[ResultT]:
        """创建成功结果."""
        return cls(success=True, data=data, message=message)

    @classmethod
    def fail(
        cls,
        message: str,
        *,
        message_key: str | None = None,
        extra: PayloadMapping | None = None,
    ) -> ServiceResult[ResultT]:
        """创建失败结果.

        Args:
            message: 错误消息.
            message_key: 可选的消息键.
            extra: 可选的额外信息字典.

        Returns:
            失败的 ServiceResult 实例.

        """
        payload = dict(extra) if extra else {}
        return cls(success=False, data=None, message=message, message_key=message_key, extra=payload)


class BaseResourceService(Generic[ResourceT]):
    """资源表单服务基类.

    提供通用的资源创建和更新流程,子类只需实现 validate、assign、after_save 等钩子即可.
    本类只 flush 不 commit,事务边界由调用方决定.
    """

    # --------------------------------------------------------------------- #
    # 钩子
    # --------------------------------------------------------------------- #
    def sanitize(self, payload: PayloadMapping) -> MutablePayloadDict:
        """清理原始请求数据,默认转换为普通字典."""
        return dict(payload or {})

    def validate(self, data: MutablePayloadDict, *, resource: ResourceT | None) -> ServiceResult[MutablePayloadDict]:
        """子类应该实现具体校验逻辑.

        Args:
            data: 清理后的数据.
            resource: 已存在的资源实例(编辑场景),创建时为 None.

        Returns:
            校验结果,成功时返回清理后的数据,失败时返回错误信息.

        """
        del resource
        return ServiceResult.ok(data)

    def create_instance(self) -> ResourceT:
        """创建新的模型实例,必须由子类实现."""
        raise NotImplementedError

    def assign(self, instance: ResourceT, data: MutablePayloadDict) -> None:
        """将数据写入模型实例,必须由子类实现."""
        raise NotImplementedError

    def after_save(self, instance: ResourceT, data: MutablePayloadDict) -> None:
        """保存成功后的钩子(可选)."""
        del instance, data

    # --------------------------------------------------------------------- #
    # 主流程
    # --------------------------------------------------------------------- #
    def upsert(self, payload: PayloadMapping, resource: ResourceT | None = None) -> ServiceResult[ResourceT]:
        """创建或更新资源.

        执行完整的资源保存流程:清理数据 -> 校验 -> 赋值 -> 保存 -> 后置钩子.

        Args:
            payload: 原始请求数据.
            resource: 已存在的实例(编辑场景),创建时为 None.

        Returns:
            ServiceResult 实例,成功时包含保存后的资源对象,失败时包含错误信息.

        """
        sanitized = self.sanitize(payload)
        validation = self.validate(sanitized, resource=resource)
        if not validation.success:
            return ServiceResult.fail(
                validation.message or "Validation failed",
                message_key=validation.message_key,
                extra=validation.extra,
            )

        instance = resource if resource is not None else self.create_instance()
        data = validation.data if validation.data is not None else sanitized
        self.assign(instance, data)

        try:
            db.session.add(instance)
            db.session.flush()
        except SQLAlchemyError as exc:
            db.session.rollback()
            log_error(
                "资源表单保存失败",
                module="form_service",
                exception=exc,
                service=self.__class__.__name__,
            )
            return ServiceResult.fail("Failed to save, please try again later", message_key="DATABASE_QUERY_ERROR")

        self.after_save(instance, data)
        return ServiceResult.ok(instance)
