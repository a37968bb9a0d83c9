"""通用资源文档服务."""

from fittrack.services.resources.resource_document_service import ResourceDocumentService

__all__ = ["ResourceDocumentService"]
