"""
机构（租户）上下文解析
"""
from dataclasses import dataclass
from typing import Optional

from viewcount.core.exceptions import NoActiveTenantError
from viewcount.schemas.viewcount import InstitutionRef


@dataclass(frozen=True)
class TenantContext:
    """
    一次请求/操作期间绑定的机构上下文

    显式传入每个需要机构范围的调用，不存在全局默认机构
    """
    institution_id: Optional[int] = None

    def __post_init__(self):
        if self.institution_id is None:
            return
        if isinstance(self.institution_id, bool) or not isinstance(self.institution_id, int) or self.institution_id <= 0:
            raise ValueError(f"机构ID必须是正整数: {self.institution_id!r}")

    @classmethod
    def for_institution(cls, institution: InstitutionRef) -> "TenantContext":
        return cls(institution_id=institution.id)

    @classmethod
    def unbound(cls) -> "TenantContext":
        """未绑定机构的上下文（如后台任务）"""
        return cls()

    @property
    def is_bound(self) -> bool:
        return self.institution_id is not None

    def current_institution_id(self) -> int:
        """
        获取当前机构ID

        Returns:
            int: 机构数据库ID

        Raises:
            NoActiveTenantError: 上下文未绑定机构
        """
        if self.institution_id is None:
            raise NoActiveTenantError()
        return self.institution_id


def resolve_institution_id(tenant: Optional[TenantContext]) -> int:
    """解析机构ID，上下文缺失或未绑定时快速失败"""
    if tenant is None:
        raise NoActiveTenantError("未提供机构上下文")
    return tenant.current_institution_id()
