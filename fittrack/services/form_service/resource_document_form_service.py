"""通用资源文档表单服务."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fittrack.forms.definitions import get_form_definition
from fittrack.forms.validation import coerce_values, first_error, validate_values
from fittrack.models.resource_document import ResourceDocument
from fittrack.services.form_service.resource_service import BaseResourceService, ServiceResult
from fittrack.utils.structlog_config import log_info

if TYPE_CHECKING:
    from fittrack.core.resources import ResourceDefinition
    from fittrack.forms.definitions.base import ResourceFormDefinition
    from fittrack.types import MutablePayloadDict, PayloadMapping

_SERVER_MANAGED_KEYS = ("_id", "id", "createdAt", "updatedAt", "__v")


class ResourceDocumentFormService(BaseResourceService[ResourceDocument]):
    """资源文档的创建/更新流程.

    负载对服务端不透明,只按表单定义做必填与类型校验.更新时先与已有负载合并,
    因此客户端可以只提交变更的字段.
    """

    def __init__(self, definition: ResourceDefinition, *, owner_id: int | None = None) -> None:
        self.definition = definition
        self.owner_id = owner_id
        self.form_definition: ResourceFormDefinition = get_form_definition(definition.name)

    def sanitize(self, payload: PayloadMapping) -> MutablePayloadDict:
        data = dict(payload or {})
        for key in _SERVER_MANAGED_KEYS:
            data.pop(key, None)
        if self.definition.owned:
            data.pop("userId", None)
        return data

    def validate(
        self,
        data: MutablePayloadDict,
        *,
        resource: ResourceDocument | None,
    ) -> ServiceResult[MutablePayloadDict]:
        merged: MutablePayloadDict = dict(resource.payload or {}) if resource is not None else {}
        merged.update(data)
        errors = validate_values(self.form_definition.fields, merged)
        if errors:
            message = first_error(errors) or "Validation failed"
            return ServiceResult.fail(message, message_key="VALIDATION_ERROR", extra={"errors": dict(errors)})
        return ServiceResult.ok(coerce_values(self.form_definition.fields, merged))

    def create_instance(self) -> ResourceDocument:
        return ResourceDocument(resource=self.definition.name, owner_id=self.owner_id)

    def assign(self, instance: ResourceDocument, data: MutablePayloadDict) -> None:
        payload = dict(data)
        if self.definition.owned and instance.owner_id is not None:
            payload["userId"] = str(instance.owner_id)
        # 重新赋值整个字典,确保 JSON 列变更被 SQLAlchemy 感知
        instance.payload = payload

    def after_save(self, instance: ResourceDocument, data: MutablePayloadDict) -> None:
        log_info(
            "资源文档已保存",
            module="resources",
            resource=self.definition.name,
            document_id=instance.id,
            owner_id=instance.owner_id,
            field_count=len(data),
        )
