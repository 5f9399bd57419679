"""
应用配置文件
"""
from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    """应用配置"""
    
    # 应用基本配置
    APP_NAME: str = "View Count Store"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    
    # 数据库配置（支持 sqlite+aiosqlite 与 postgresql+asyncpg）
    DATABASE_URL: str = "sqlite+aiosqlite:///./viewcount.sqlite"
    DB_POOL_SIZE: int = 10
    DB_MAX_OVERFLOW: int = 20
    SQLITE_BUSY_TIMEOUT_MS: int = 5000  # 并发写入时等待锁的时间
    
    # 日志配置
    LOG_LEVEL: str = "INFO"
    LOG_FILE: Optional[str] = None  # 为空时只输出到控制台
    
    class Config:
        case_sensitive = True
        env_file = ".env"


settings = Settings()
