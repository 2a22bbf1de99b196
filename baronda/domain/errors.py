"""Exceptions raised by the notification use cases."""

from __future__ import annotations


class NotificationError(ValueError):
    """Base class for every notification domain error."""


class EmptySelection(NotificationError):
    """The targeting rule resolved to no recipients; nothing is sent."""

    def __init__(self, message: str = "Tidak ada penerima yang cocok dengan target") -> None:
        super().__init__(message)


class TemplateTooLong(NotificationError):
    """A title or body exceeds its length ceiling."""

    def __init__(self, field: str, length: int, limit: int, *, recipient_id: str | None = None) -> None:
        self.field = field
        self.length = length
        self.limit = limit
        self.recipient_id = recipient_id
        detail = f"{field} terlalu panjang ({length} karakter, maksimal {limit})"
        if recipient_id is not None:
            detail = f"{detail} untuk penerima {recipient_id}"
        super().__init__(detail)


class FanoutWriteFailed(NotificationError):
    """Persisting a fan-out batch failed.

    ``committed`` counts records made durable by earlier sub-batches of the
    same call; those stay visible because each sub-batch commits on its own.
    """

    def __init__(self, batch_id: str, *, committed: int = 0) -> None:
        self.batch_id = batch_id
        self.committed = committed
        super().__init__(
            f"Gagal menyimpan pemberitahuan untuk batch {batch_id} "
            f"({committed} tersimpan sebelum gagal)"
        )


class FanoutBatchConflict(NotificationError):
    """An idempotency key was reused for a different message."""

    def __init__(self, batch_id: str) -> None:
        self.batch_id = batch_id
        super().__init__(f"Batch {batch_id} sudah dipakai untuk pemberitahuan lain")


class ReadStateConflict(NotificationError):
    """The record targeted by a read transition no longer exists."""

    def __init__(self, record_id: str) -> None:
        self.record_id = record_id
        super().__init__(f"Pemberitahuan {record_id} sudah tidak ada")


class AccessDenied(NotificationError):
    """The caller may not read or mutate the requested records."""

    def __init__(self, message: str = "Tidak diizinkan") -> None:
        super().__init__(message)


class BulkDeleteFailed(NotificationError):
    """A bulk delete stopped part way; ``deleted`` records are already gone."""

    def __init__(self, deleted: int) -> None:
        self.deleted = deleted
        super().__init__(f"Penghapusan terhenti setelah {deleted} pemberitahuan terhapus")


class InvalidCursor(NotificationError):
    """A pagination cursor could not be decoded."""

    def __init__(self) -> None:
        super().__init__("Kursor halaman tidak valid")


class InvalidPeriodKey(NotificationError):
    """A dues period could not be parsed into month and year."""

    def __init__(self, raw: str) -> None:
        self.raw = raw
        super().__init__(f"Periode iuran tidak dikenali: {raw!r}")


class MalformedDeliveryRecord(NotificationError):
    """A stored delivery record is missing required fields."""


__all__ = [
    "NotificationError",
    "EmptySelection",
    "TemplateTooLong",
    "FanoutWriteFailed",
    "FanoutBatchConflict",
    "ReadStateConflict",
    "AccessDenied",
    "BulkDeleteFailed",
    "InvalidCursor",
    "InvalidPeriodKey",
    "MalformedDeliveryRecord",
]
