"""
测试机构上下文解析
"""
import pytest
from pydantic import ValidationError

from viewcount.core.exceptions import NoActiveTenantError, ViewCountError
from viewcount.core.tenant import TenantContext, resolve_institution_id
from viewcount.schemas.viewcount import InstitutionRef, ItemKey


def test_bound_context_returns_institution_id():
    tenant = TenantContext.for_institution(InstitutionRef(id=7, shortName="demo"))
    assert tenant.is_bound
    assert tenant.current_institution_id() == 7
    assert resolve_institution_id(tenant) == 7


def test_unbound_context_fails_fast():
    """未绑定机构时不能退回到任何默认机构"""
    tenant = TenantContext.unbound()
    assert not tenant.is_bound
    with pytest.raises(NoActiveTenantError):
        tenant.current_institution_id()
    with pytest.raises(NoActiveTenantError):
        resolve_institution_id(tenant)


def test_missing_context_fails_fast():
    with pytest.raises(NoActiveTenantError):
        resolve_institution_id(None)


def test_no_active_tenant_is_view_count_error():
    assert issubclass(NoActiveTenantError, ViewCountError)


def test_context_is_immutable():
    tenant = TenantContext(institution_id=1)
    with pytest.raises(AttributeError):
        tenant.institution_id = 2


def test_institution_ref_rejects_non_positive_id():
    with pytest.raises(ValidationError):
        InstitutionRef(id=0)


def test_item_key_validation():
    assert str(ItemKey(uuid="abc-123", version=1)) == "abc-123/1"
    with pytest.raises(ValidationError):
        ItemKey(uuid="", version=1)
    with pytest.raises(ValidationError):
        ItemKey(uuid="abc-123", version=-1)
    with pytest.raises(ValidationError):
        ItemKey(uuid="abc-123", version=0)


@pytest.mark.parametrize("institution_id", [0, -5, True, "1"])
def test_context_rejects_invalid_institution_id(institution_id):
    """直接构造上下文与 InstitutionRef 遵循同样的机构ID规则"""
    with pytest.raises(ValueError):
        TenantContext(institution_id=institution_id)
