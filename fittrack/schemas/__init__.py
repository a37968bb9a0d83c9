"""请求参数与写路径 payload 的 pydantic schema."""
