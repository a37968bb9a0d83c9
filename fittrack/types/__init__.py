"""通用结构化数据类型别名.

统一 JSON/Mapping 风格的类型,方便在视图、服务、客户端状态层中共享定义.
"""

from __future__ import annotations

from collections.abc import Mapping, MutableMapping, Sequence
from typing import TypeAlias

ScalarValue: TypeAlias = str | int | float | bool | None
JsonValue: TypeAlias = ScalarValue | Sequence["JsonValue"] | Mapping[str, "JsonValue"]
JsonDict: TypeAlias = dict[str, JsonValue]
PayloadMapping: TypeAlias = Mapping[str, JsonValue]
MutablePayloadDict: TypeAlias = dict[str, JsonValue]
StructlogEventDict: TypeAlias = MutableMapping[str, JsonValue]
LoggerExtra: TypeAlias = Mapping[str, JsonValue]

# 资源记录在客户端与服务端之间都视为不透明的 JSON 对象
ResourceRecord: TypeAlias = dict[str, JsonValue]

__all__ = [
    "JsonDict",
    "JsonValue",
    "LoggerExtra",
    "MutablePayloadDict",
    "PayloadMapping",
    "ResourceRecord",
    "ScalarValue",
    "StructlogEventDict",
]
