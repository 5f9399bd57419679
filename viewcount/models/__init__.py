from .viewcount_attachment import ViewcountAttachment
from .viewcount_item import ViewcountItem

__all__ = [
    "ViewcountAttachment",
    "ViewcountItem"
]
