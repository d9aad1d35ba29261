# =============================================================================
# core/services/__init__.py - Service Layer Exports
# =============================================================================

from .user_service import UserService
from .export_service import ExportService, remove_export_file

__all__ = [
    "UserService",
    "ExportService",
    "remove_export_file",
]
