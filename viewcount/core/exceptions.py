"""
浏览计数异常定义
"""


class ViewCountError(Exception):
    """浏览计数子系统异常基类"""


class NoActiveTenantError(ViewCountError):
    """
    当前执行上下文未绑定机构

    不会自动重试，调用方需先建立机构上下文
    """

    def __init__(self, message: str = "当前上下文未绑定机构"):
        super().__init__(message)


class StoreUnavailableError(ViewCountError):
    """持久化存储不可用或查询在基础设施层失败"""

    def __init__(self, operation: str, message: str = "存储不可用"):
        self.operation = operation
        super().__init__(f"{message}: {operation}")
