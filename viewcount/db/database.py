"""
数据库连接和会话管理
"""
import logging

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.orm import declarative_base
from viewcount.core.config import settings

logger = logging.getLogger(__name__)


def _set_sqlite_pragmas(dbapi_connection, connection_record):
    """SQLite 开启 WAL 并设置忙等待，使并发写入排队而不是直接失败"""
    cursor = dbapi_connection.cursor()
    try:
        cursor.execute('PRAGMA journal_mode=WAL')
        cursor.execute('PRAGMA synchronous=NORMAL')
        cursor.execute(f'PRAGMA busy_timeout={settings.SQLITE_BUSY_TIMEOUT_MS}')
    finally:
        cursor.close()


def build_engine(database_url: str, echo: bool = False) -> AsyncEngine:
    """
    创建异步引擎

    Args:
        database_url: 数据库连接URL
        echo: 是否输出SQL

    Returns:
        AsyncEngine: 异步引擎
    """
    if database_url.startswith("sqlite"):
        engine = create_async_engine(
            database_url,
            echo=echo,
            connect_args={"timeout": settings.SQLITE_BUSY_TIMEOUT_MS / 1000},
        )
        event.listen(engine.sync_engine, "connect", _set_sqlite_pragmas)
        return engine

    return create_async_engine(
        database_url,
        echo=echo,
        pool_pre_ping=True,
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=settings.DB_MAX_OVERFLOW,
    )


def build_session_factory(bind: AsyncEngine) -> async_sessionmaker:
    """创建会话工厂"""
    return async_sessionmaker(
        bind,
        class_=AsyncSession,
        expire_on_commit=False,
        autocommit=False,
        autoflush=False,
    )


# 创建异步引擎
engine = build_engine(settings.DATABASE_URL, echo=settings.DEBUG)

# 创建会话工厂
AsyncSessionLocal = build_session_factory(engine)

# 创建Base类
Base = declarative_base()


async def create_schema(bind: AsyncEngine = engine) -> None:
    """创建浏览计数相关表及索引（已存在时跳过）"""
    # 注册模型到 Base.metadata
    import viewcount.models  # noqa: F401

    async with bind.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("浏览计数表结构已就绪: %s", ", ".join(sorted(Base.metadata.tables)))


async def drop_schema(bind: AsyncEngine = engine) -> None:
    """删除浏览计数相关表"""
    import viewcount.models  # noqa: F401

    async with bind.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
