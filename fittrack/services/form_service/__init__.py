"""表单服务模块.

主要服务:
- BaseResourceService: 资源表单服务基类
- ResourceDocumentFormService: 通用资源文档表单服务
"""
