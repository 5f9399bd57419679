"""
初始化浏览计数数据库表
"""
import asyncio
import sys

from viewcount.core.config import settings
from viewcount.core.logging_config import setup_logging
from viewcount.db.database import engine, create_schema, drop_schema


async def init_db(reset: bool = False):
    """创建浏览计数表，reset=True 时先删除已有表"""
    try:
        if reset:
            await drop_schema(engine)
            print("✅ 已删除浏览计数表")
        await create_schema(engine)
        print("✅ 浏览计数表已创建")
    finally:
        await engine.dispose()


if __name__ == "__main__":
    setup_logging()
    print("=" * 60)
    print(f"初始化数据库: {settings.DATABASE_URL}")
    print("=" * 60)

    reset = "--reset" in sys.argv
    if reset:
        print("\n⚠️  警告: 此操作将删除 viewcount_attachment、viewcount_item 表的所有数据")
        confirm = input("确认执行此操作? (输入 'yes' 确认): ")
        if confirm.lower() != 'yes':
            print("\n❌ 操作已取消")
            sys.exit(0)

    asyncio.run(init_db(reset=reset))
