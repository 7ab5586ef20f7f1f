from __future__ import annotations

from typing import Sequence

from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.ext.asyncio import AsyncSession

from teamchat.domain.entities.read_receipt import ReadReceipt
from teamchat.infrastructure.db.models.read_receipt import MessageReadModel


class ReadReceiptWriterRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def bulk_insert(
        self,
        receipts: Sequence[ReadReceipt],
        *,
        skip_duplicates: bool = True,
    ) -> list[int]:
        if not receipts:
            return []
        stmt = pg_insert(MessageReadModel).values(
            [
                {"message_id": r.message_id, "user_id": r.user_id, "read_at": r.read_at}
                for r in receipts
            ]
        )
        if skip_duplicates:
            stmt = stmt.on_conflict_do_nothing(constraint="uq_message_read")
        result = await self._session.execute(stmt.returning(MessageReadModel.message_id))
        return list(result.scalars().all())
