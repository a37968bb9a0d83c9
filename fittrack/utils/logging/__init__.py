"""结构化日志支撑模块."""
