"""认证相关服务."""
