"""
浏览计数服务
"""
from .attachment_view_count import AttachmentViewCountStore
from .item_view_count import ItemViewCountStore
from .view_count_service import ViewCountService

__all__ = [
    "AttachmentViewCountStore",
    "ItemViewCountStore",
    "ViewCountService",
]
