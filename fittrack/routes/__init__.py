"""路由模块.

定义所有 HTTP 路由端点,处理客户端请求并返回响应.

主要路由:
- health: 健康检查
- auth: 注册、登录、令牌刷新、密码重置
- users: 个人资料与用户列表
- resources: 按资源注册表生成的通用 CRUD 蓝图
"""

# 该文件仅作为包标识,避免在导入阶段引入循环依赖.
