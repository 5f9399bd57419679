"""
浏览计数服务

供外部协作方调用的统一入口：浏览页面上报浏览、报表页面读取聚合、
条目生命周期管理在条目版本永久删除时级联清理计数
"""
import logging
from typing import Dict, Optional

from sqlalchemy.ext.asyncio import async_sessionmaker

from viewcount.core.tenant import TenantContext, resolve_institution_id
from viewcount.db.store import BaseCountStore
from viewcount.schemas.viewcount import InstitutionRef, ItemKey
from viewcount.services.attachment_view_count import AttachmentViewCountStore
from viewcount.services.item_view_count import ItemViewCountStore

logger = logging.getLogger(__name__)


class ViewCountService(BaseCountStore):
    """浏览计数服务类"""

    def __init__(self, session_factory: Optional[async_sessionmaker] = None):
        super().__init__(session_factory)
        self.attachments = AttachmentViewCountStore(self._session_factory)
        self.items = ItemViewCountStore(self._session_factory)

    async def record_attachment_view(
        self,
        tenant: TenantContext,
        item_key: ItemKey,
        attachment: str,
        collection_id: int
    ) -> None:
        """
        记录一次附件浏览

        附件计数与条目计数在同一事务内递增
        """
        institution_id = resolve_institution_id(tenant)
        async with self.transaction("record_attachment_view") as session:
            await self.attachments.record_view_in_session(
                session, institution_id, item_key, attachment, collection_id
            )
            await self.items.record_view_in_session(session, institution_id, item_key, collection_id)

    async def record_item_view(self, tenant: TenantContext, item_key: ItemKey, collection_id: int) -> None:
        """记录一次条目浏览（不涉及附件）"""
        await self.items.record_view(tenant, item_key, collection_id)

    async def get_attachment_view_count_for_collection(self, tenant: TenantContext, collection_id: int) -> int:
        return await self.attachments.get_attachment_view_count_for_collection(tenant, collection_id)

    async def get_item_view_count_for_collection(self, tenant: TenantContext, collection_id: int) -> int:
        return await self.items.get_item_view_count_for_collection(tenant, collection_id)

    async def get_attachment_view_counts(self, tenant: TenantContext, item_key: ItemKey) -> Dict[str, int]:
        return await self.attachments.get_attachment_view_counts(tenant, item_key)

    async def get_item_view_count(self, tenant: TenantContext, item_key: ItemKey) -> int:
        return await self.items.get_item_view_count(tenant, item_key)

    async def delete_view_count_for_item(self, institution: InstitutionRef, item_key: ItemKey) -> None:
        """
        删除条目版本的全部浏览计数（条目与附件）

        单个事务内完成，并发读取方要么看到全部记录，要么一条都看不到
        """
        async with self.transaction("delete_view_count_for_item") as session:
            attachment_rows = await self.attachments.delete_for_item_in_session(session, institution.id, item_key)
            item_rows = await self.items.delete_for_item_in_session(session, institution.id, item_key)
        logger.info(
            "删除条目浏览计数: 机构%s %s, 附件%d条, 条目%d条",
            institution.id, item_key, attachment_rows, item_rows
        )

    async def delete_view_counts_for_institution(self, institution: InstitutionRef) -> int:
        """删除机构的全部浏览计数，返回删除的总条数"""
        async with self.transaction("delete_view_counts_for_institution") as session:
            deleted = await self.attachments.delete_institution_in_session(session, institution.id)
            deleted += await self.items.delete_institution_in_session(session, institution.id)
        logger.info("删除机构%s的全部浏览计数, 共%d条", institution.id, deleted)
        return deleted
