"""服务层模块.

主要模块:
- form_service: 资源写入流程(清理、校验、赋值、保存)
- resources: 通用资源文档的列表与增删改查
- auth: 注册、登录、令牌刷新与密码重置
- users: 个人资料读取与编辑
"""
