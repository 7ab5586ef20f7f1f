from __future__ import annotations

from typing import Protocol, Sequence

from teamchat.domain.entities.read_receipt import ReadReceipt


class ReadReceiptWriter(Protocol):
    async def bulk_insert(
        self,
        receipts: Sequence[ReadReceipt],
        *,
        skip_duplicates: bool = True,
    ) -> list[int]:
        """Insert receipts, returning the message ids that were newly marked."""
        ...
