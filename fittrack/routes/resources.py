"""FitTrack - 通用资源 CRUD 路由.

每个注册资源生成一个蓝图,挂载于 ``/api/<path>``:

- ``GET    /<path>``        分页列表(page/limit/search/sort/order)
- ``GET    /<path>/<id>``   单条读取
- ``POST   /<path>``        创建,返回 201
- ``PUT    /<path>/<id>``   更新
- ``DELETE /<path>/<id>``   删除
"""

from __future__ import annotations

from flask import Blueprint, request
from flask.typing import ResponseReturnValue
from flask_jwt_extended import get_jwt_identity, jwt_required

from fittrack.constants import HttpStatus
from fittrack.constants.system_constants import SuccessMessages
from fittrack.core.resources import ResourceDefinition, iter_resources
from fittrack.errors import AuthenticationError
from fittrack.schemas.resources_query import ResourceListQuery
from fittrack.services.resources import ResourceDocumentService
from fittrack.utils.logging.context_vars import user_id_var
from fittrack.utils.response_utils import jsonify_unified_success
from fittrack.utils.route_safety import safe_route_call


def _current_user_id() -> int:
    identity = get_jwt_identity()
    try:
        user_id = int(identity)
    except (TypeError, ValueError):
        raise AuthenticationError(message_key="TOKEN_INVALID") from None
    user_id_var.set(str(user_id))
    return user_id


def _request_payload() -> dict:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def build_resource_blueprint(definition: ResourceDefinition) -> Blueprint:
    """为单个资源构造 CRUD 蓝图.

    Args:
        definition: 资源定义.

    Returns:
        未注册的蓝图,规则以 ``/<path>`` 开头,由调用方统一加上 ``/api`` 前缀.

    """
    blueprint = Blueprint(f"resource_{definition.name}", __name__)
    collection_rule = f"/{definition.path}"
    item_rule = f"/{definition.path}/<record_id>"
    service = ResourceDocumentService(definition)
    module = f"resources.{definition.name}"

    @blueprint.route(collection_rule, methods=["GET"])
    @jwt_required()
    def list_records() -> ResponseReturnValue:
        owner_id = _current_user_id()

        def _execute() -> ResponseReturnValue:
            filters = ResourceListQuery.from_args(request.args, definition).to_filters()
            result = service.list_records(filters, owner_id=owner_id)
            return jsonify_unified_success(
                data={
                    definition.list_key: result.items,
                    "total": result.total,
                    "page": result.page,
                    "limit": result.limit,
                    "totalPages": result.pages,
                },
            )

        return safe_route_call(
            _execute,
            module=module,
            action="list_records",
            public_error=f"Failed to fetch {definition.label}",
            context={"query": request.query_string.decode("utf-8", "replace")},
        )

    @blueprint.route(item_rule, methods=["GET"])
    @jwt_required()
    def get_record(record_id: str) -> ResponseReturnValue:
        owner_id = _current_user_id()
        return safe_route_call(
            lambda: jsonify_unified_success(data=service.get_record(record_id, owner_id=owner_id)),
            module=module,
            action="get_record",
            public_error=f"Failed to fetch {definition.item_label}",
            context={"record_id": record_id},
        )

    @blueprint.route(collection_rule, methods=["POST"])
    @jwt_required()
    def create_record() -> ResponseReturnValue:
        owner_id = _current_user_id()
        payload = _request_payload()

        def _execute() -> ResponseReturnValue:
            return jsonify_unified_success(
                data=service.create_record(payload, owner_id=owner_id),
                message=SuccessMessages.DATA_SAVED,
                status=HttpStatus.CREATED,
            )

        return safe_route_call(
            _execute,
            module=module,
            action="create_record",
            public_error=f"Failed to create {definition.item_label}",
        )

    @blueprint.route(item_rule, methods=["PUT"])
    @jwt_required()
    def update_record(record_id: str) -> ResponseReturnValue:
        owner_id = _current_user_id()
        payload = _request_payload()

        def _execute() -> ResponseReturnValue:
            return jsonify_unified_success(
                data=service.update_record(record_id, payload, owner_id=owner_id),
                message=SuccessMessages.DATA_UPDATED,
            )

        return safe_route_call(
            _execute,
            module=module,
            action="update_record",
            public_error=f"Failed to update {definition.item_label}",
            context={"record_id": record_id},
        )

    @blueprint.route(item_rule, methods=["DELETE"])
    @jwt_required()
    def delete_record(record_id: str) -> ResponseReturnValue:
        owner_id = _current_user_id()

        def _execute() -> ResponseReturnValue:
            service.delete_record(record_id, owner_id=owner_id)
            return jsonify_unified_success(message=SuccessMessages.DATA_DELETED)

        return safe_route_call(
            _execute,
            module=module,
            action="delete_record",
            public_error=f"Failed to delete {definition.item_label}",
            context={"record_id": record_id},
        )

    return blueprint


def build_resource_blueprints() -> list[Blueprint]:
    """为注册表中的全部资源构造蓝图."""
    return [build_resource_blueprint(definition) for definition in iter_resources()]
