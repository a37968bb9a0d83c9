"""用户资料相关服务."""
