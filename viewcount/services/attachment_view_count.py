"""
附件浏览计数存储
"""
import logging
from typing import Dict

from sqlalchemy import select, delete, func, and_
from sqlalchemy.ext.asyncio import AsyncSession

from viewcount.core.tenant import TenantContext, resolve_institution_id
from viewcount.db.store import BaseCountStore, increment_counter, check_attachment, check_collection_id
from viewcount.models.viewcount_attachment import ViewcountAttachment
from viewcount.schemas.viewcount import InstitutionRef, ItemKey

logger = logging.getLogger(__name__)


class AttachmentViewCountStore(BaseCountStore):
    """
    附件浏览计数的读写与聚合

    所有读取和递增都限定在调用方上下文解析出的机构内；
    按条目删除时机构由调用方显式传入
    """

    async def record_view(
        self,
        tenant: TenantContext,
        item_key: ItemKey,
        attachment: str,
        collection_id: int
    ) -> None:
        """
        记录一次附件浏览

        Args:
            tenant: 机构上下文
            item_key: 条目版本键
            attachment: 附件UUID
            collection_id: 条目所属集合ID

        Raises:
            NoActiveTenantError: 上下文未绑定机构
            StoreUnavailableError: 存储不可用
        """
        institution_id = resolve_institution_id(tenant)
        async with self.transaction("record_view") as session:
            await self.record_view_in_session(session, institution_id, item_key, attachment, collection_id)
        logger.debug("附件浏览 +1: 机构%s %s %s", institution_id, item_key, attachment)

    async def record_view_in_session(
        self,
        session: AsyncSession,
        institution_id: int,
        item_key: ItemKey,
        attachment: str,
        collection_id: int
    ) -> None:
        check_attachment(attachment)
        check_collection_id(collection_id)
        await increment_counter(
            session,
            ViewcountAttachment,
            key={
                "institution_id": institution_id,
                "item_uuid": item_key.uuid,
                "item_version": item_key.version,
                "attachment": attachment,
            },
            collection_id=collection_id
        )

    async def get_attachment_view_count_for_collection(self, tenant: TenantContext, collection_id: int) -> int:
        """
        统计当前机构下某集合内所有附件的浏览总数

        集合不存在或没有任何浏览记录时返回 0
        """
        institution_id = resolve_institution_id(tenant)
        async with self.reader("get_attachment_view_count_for_collection") as session:
            result = await session.execute(
                select(func.sum(ViewcountAttachment.view_count)).where(
                    and_(
                        ViewcountAttachment.institution_id == institution_id,
                        ViewcountAttachment.collection_id == collection_id
                    )
                )
            )
            count = result.scalar()
        return int(count) if count is not None else 0

    async def get_attachment_view_count(self, tenant: TenantContext, item_key: ItemKey, attachment: str) -> int:
        """获取单个附件的浏览次数，无记录时返回 0"""
        institution_id = resolve_institution_id(tenant)
        async with self.reader("get_attachment_view_count") as session:
            result = await session.execute(
                select(ViewcountAttachment.view_count).where(
                    and_(
                        ViewcountAttachment.institution_id == institution_id,
                        ViewcountAttachment.item_uuid == item_key.uuid,
                        ViewcountAttachment.item_version == item_key.version,
                        ViewcountAttachment.attachment == attachment
                    )
                )
            )
            count = result.scalar_one_or_none()
        return count if count is not None else 0

    async def get_attachment_view_counts(self, tenant: TenantContext, item_key: ItemKey) -> Dict[str, int]:
        """
        获取条目版本下每个附件的浏览次数

        Returns:
            Dict[str, int]: {附件UUID: 浏览次数}，没有记录的附件不出现
        """
        institution_id = resolve_institution_id(tenant)
        async with self.reader("get_attachment_view_counts") as session:
            result = await session.execute(
                select(ViewcountAttachment.attachment, ViewcountAttachment.view_count).where(
                    and_(
                        ViewcountAttachment.institution_id == institution_id,
                        ViewcountAttachment.item_uuid == item_key.uuid,
                        ViewcountAttachment.item_version == item_key.version
                    )
                )
            )
            return {attachment: count for attachment, count in result.all()}

    async def delete_attachment_view_count_for_item(self, institution: InstitutionRef, item_key: ItemKey) -> None:
        """
        删除条目版本的全部附件浏览计数

        机构显式传入（条目生命周期管理可能在请求上下文之外调用）。
        没有匹配记录时静默成功。删除不可恢复。
        """
        async with self.transaction("delete_attachment_view_count_for_item") as session:
            deleted = await self.delete_for_item_in_session(session, institution.id, item_key)
        logger.info("删除附件浏览计数: 机构%s %s, 共%d条", institution.id, item_key, deleted)

    async def delete_for_item_in_session(self, session: AsyncSession, institution_id: int, item_key: ItemKey) -> int:
        result = await session.execute(
            delete(ViewcountAttachment).where(
                and_(
                    ViewcountAttachment.institution_id == institution_id,
                    ViewcountAttachment.item_uuid == item_key.uuid,
                    ViewcountAttachment.item_version == item_key.version
                )
            )
        )
        return result.rowcount or 0

    async def delete_all_for_institution(self, institution: InstitutionRef) -> int:
        """删除机构的全部附件浏览计数（机构被移除时调用），返回删除条数"""
        async with self.transaction("delete_all_for_institution") as session:
            deleted = await self.delete_institution_in_session(session, institution.id)
        logger.info("删除机构%s的附件浏览计数, 共%d条", institution.id, deleted)
        return deleted

    async def delete_institution_in_session(self, session: AsyncSession, institution_id: int) -> int:
        result = await session.execute(
            delete(ViewcountAttachment).where(ViewcountAttachment.institution_id == institution_id)
        )
        return result.rowcount or 0
