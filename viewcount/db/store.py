"""
计数存储公共工具：原子递增、异常转换、会话管理
"""
import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import DBAPIError, IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from viewcount.core.exceptions import StoreUnavailableError

logger = logging.getLogger(__name__)

ATTACHMENT_MAX_LENGTH = 40

# 支持原子 INSERT ... ON CONFLICT DO UPDATE 的方言
_DIALECT_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


@asynccontextmanager
async def store_operation(operation: str):
    """
    将基础设施层的数据库异常转换为 StoreUnavailableError

    唯一约束冲突不在此转换，应由原子upsert语句自身吸收
    """
    try:
        yield
    except IntegrityError:
        raise
    except (DBAPIError, OSError) as e:
        logger.error("存储操作失败 [%s]: %s", operation, e)
        raise StoreUnavailableError(operation) from e


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def check_collection_id(collection_id: Any) -> None:
    """集合ID必须是整数，避免调用方错误落到 NOT NULL 约束或被误报为存储故障"""
    if isinstance(collection_id, bool) or not isinstance(collection_id, int):
        raise ValueError(f"集合ID必须是整数: {collection_id!r}")


def check_attachment(attachment: Any) -> None:
    """附件UUID必须是长度 1-40 的字符串"""
    if not isinstance(attachment, str) or not 1 <= len(attachment) <= ATTACHMENT_MAX_LENGTH:
        raise ValueError(f"附件标识长度须在1-{ATTACHMENT_MAX_LENGTH}之间: {attachment!r}")


async def increment_counter(
    session: AsyncSession,
    model,
    key: Dict[str, Any],
    collection_id: int,
    viewed_at: Optional[datetime] = None
) -> None:
    """
    原子地递增计数，记录不存在时以 count=1 插入

    单条 INSERT ... ON CONFLICT (主键) DO UPDATE 语句完成，
    不存在读-改-写，并发调用不会丢失更新

    Args:
        session: 数据库会话
        model: 计数模型（主键列必须全部出现在 key 中）
        key: 主键列取值
        collection_id: 所属集合ID
        viewed_at: 浏览时间，默认当前UTC时间
    """
    dialect_name = session.get_bind().dialect.name
    insert = _DIALECT_INSERTS.get(dialect_name)
    if insert is None:
        raise NotImplementedError(f"不支持的数据库方言: {dialect_name}")

    viewed_at = viewed_at or utcnow()
    index_elements: List[str] = [column.name for column in model.__table__.primary_key.columns]

    stmt = insert(model).values(
        **key,
        collection_id=collection_id,
        view_count=1,
        last_viewed=viewed_at
    )
    stmt = stmt.on_conflict_do_update(
        index_elements=index_elements,
        set_={
            "view_count": model.view_count + 1,
            "collection_id": stmt.excluded.collection_id,
            "last_viewed": stmt.excluded.last_viewed,
        }
    )
    await session.execute(stmt)


class BaseCountStore:
    """计数存储基类，每个公开操作使用独立会话/事务"""

    def __init__(self, session_factory: Optional[async_sessionmaker] = None):
        if session_factory is None:
            from viewcount.db.database import AsyncSessionLocal
            session_factory = AsyncSessionLocal
        self._session_factory = session_factory

    @asynccontextmanager
    async def transaction(self, operation: str):
        """开启写事务，正常退出时提交，异常时回滚"""
        async with store_operation(operation):
            async with self._session_factory.begin() as session:
                yield session

    @asynccontextmanager
    async def reader(self, operation: str):
        """只读会话"""
        async with store_operation(operation):
            async with self._session_factory() as session:
                yield session
