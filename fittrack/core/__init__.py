"""核心领域定义,包括资源注册表."""
