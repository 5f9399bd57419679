"""
日志配置
"""
import logging
import os
from logging.handlers import RotatingFileHandler
from typing import Optional

from viewcount.core.config import settings

LOG_FORMAT = '%(asctime)s %(levelname)s [%(name)s] %(message)s'


def setup_logging(level: Optional[str] = None, log_file: Optional[str] = None) -> logging.Logger:
    """
    设置浏览计数子系统日志

    Args:
        level: 日志级别，默认使用配置中的 LOG_LEVEL
        log_file: 日志文件路径，默认使用配置中的 LOG_FILE，为空时只输出到控制台

    Returns:
        logging.Logger: 子系统根日志记录器
    """
    level = (level or settings.LOG_LEVEL).upper()
    log_file = log_file or settings.LOG_FILE

    logger = logging.getLogger('viewcount')
    logger.setLevel(level)
    formatter = logging.Formatter(LOG_FORMAT)

    # 避免重复调用时叠加处理器
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        log_dir = os.path.dirname(log_file)
        if log_dir and not os.path.exists(log_dir):
            os.makedirs(log_dir)
        file_handler = RotatingFileHandler(
            log_file,
            maxBytes=10240000,  # 10MB
            backupCount=10
        )
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger
