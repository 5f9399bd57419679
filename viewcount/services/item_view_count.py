"""
条目浏览计数存储
"""
import logging

from sqlalchemy import select, delete, func, and_
from sqlalchemy.ext.asyncio import AsyncSession

from viewcount.core.tenant import TenantContext, resolve_institution_id
from viewcount.db.store import BaseCountStore, increment_counter, check_collection_id
from viewcount.models.viewcount_item import ViewcountItem
from viewcount.schemas.viewcount import InstitutionRef, ItemKey

logger = logging.getLogger(__name__)


class ItemViewCountStore(BaseCountStore):
    """条目版本级别的浏览计数，语义与附件计数一致"""

    async def record_view(self, tenant: TenantContext, item_key: ItemKey, collection_id: int) -> None:
        """记录一次条目浏览"""
        institution_id = resolve_institution_id(tenant)
        async with self.transaction("record_item_view") as session:
            await self.record_view_in_session(session, institution_id, item_key, collection_id)
        logger.debug("条目浏览 +1: 机构%s %s", institution_id, item_key)

    async def record_view_in_session(
        self,
        session: AsyncSession,
        institution_id: int,
        item_key: ItemKey,
        collection_id: int
    ) -> None:
        check_collection_id(collection_id)
        await increment_counter(
            session,
            ViewcountItem,
            key={
                "institution_id": institution_id,
                "item_uuid": item_key.uuid,
                "item_version": item_key.version,
            },
            collection_id=collection_id
        )

    async def get_item_view_count(self, tenant: TenantContext, item_key: ItemKey) -> int:
        institution_id = resolve_institution_id(tenant)
        async with self.reader("get_item_view_count") as session:
            result = await session.execute(
                select(ViewcountItem.view_count).where(
                    and_(
                        ViewcountItem.institution_id == institution_id,
                        ViewcountItem.item_uuid == item_key.uuid,
                        ViewcountItem.item_version == item_key.version
                    )
                )
            )
            count = result.scalar_one_or_none()
        return count if count is not None else 0

    async def get_item_view_count_for_collection(self, tenant: TenantContext, collection_id: int) -> int:
        institution_id = resolve_institution_id(tenant)
        async with self.reader("get_item_view_count_for_collection") as session:
            result = await session.execute(
                select(func.sum(ViewcountItem.view_count)).where(
                    and_(
                        ViewcountItem.institution_id == institution_id,
                        ViewcountItem.collection_id == collection_id
                    )
                )
            )
            count = result.scalar()
        return int(count) if count is not None else 0

    async def delete_item_view_count_for_item(self, institution: InstitutionRef, item_key: ItemKey) -> None:
        async with self.transaction("delete_item_view_count_for_item") as session:
            deleted = await self.delete_for_item_in_session(session, institution.id, item_key)
        logger.info("删除条目浏览计数: 机构%s %s, 共%d条", institution.id, item_key, deleted)

    async def delete_for_item_in_session(self, session: AsyncSession, institution_id: int, item_key: ItemKey) -> int:
        result = await session.execute(
            delete(ViewcountItem).where(
                and_(
                    ViewcountItem.institution_id == institution_id,
                    ViewcountItem.item_uuid == item_key.uuid,
                    ViewcountItem.item_version == item_key.version
                )
            )
        )
        return result.rowcount or 0

    async def delete_all_for_institution(self, institution: InstitutionRef) -> int:
        async with self.transaction("delete_all_item_counts_for_institution") as session:
            deleted = await self.delete_institution_in_session(session, institution.id)
        logger.info("删除机构%s的条目浏览计数, 共%d条", institution.id, deleted)
        return deleted

    async def delete_institution_in_session(self, session: AsyncSession, institution_id: int) -> int:
        result = await session.execute(
            delete(ViewcountItem).where(ViewcountItem.institution_id == institution_id)
        )
        return result.rowcount or 0
