from .notification import (
    DeleteManyRequest,
    DeleteResponse,
    DeliveryRecordRead,
    FanoutRequest,
    FanoutResponse,
    InboxPageRead,
    MarkReadResponse,
    MessageTemplateIn,
    RecipientPreviewResponse,
    TargetSpec,
    UnreadCountRead,
)

__all__ = [
    "DeleteManyRequest",
    "DeleteResponse",
    "DeliveryRecordRead",
    "FanoutRequest",
    "FanoutResponse",
    "InboxPageRead",
    "MarkReadResponse",
    "MessageTemplateIn",
    "RecipientPreviewResponse",
    "TargetSpec",
    "UnreadCountRead",
]
