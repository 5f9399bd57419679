"""
测试条目浏览计数存储
"""
import asyncio

import pytest

from viewcount.core.exceptions import NoActiveTenantError
from viewcount.core.tenant import TenantContext
from viewcount.schemas.viewcount import ItemKey
from viewcount.services.item_view_count import ItemViewCountStore


@pytest.fixture
def store(session_factory):
    return ItemViewCountStore(session_factory)


async def test_item_count_and_collection_aggregate(store, tenant_one, tenant_two, item_key):
    other = ItemKey(uuid="def-456", version=1)
    for _ in range(3):
        await store.record_view(tenant_one, item_key, 42)
    await store.record_view(tenant_one, other, 42)
    await store.record_view(tenant_two, item_key, 42)

    assert await store.get_item_view_count(tenant_one, item_key) == 3
    assert await store.get_item_view_count_for_collection(tenant_one, 42) == 4
    assert await store.get_item_view_count_for_collection(tenant_two, 42) == 1
    assert await store.get_item_view_count_for_collection(tenant_one, 43) == 0


async def test_versions_are_counted_independently(store, tenant_one, item_key):
    await store.record_view(tenant_one, item_key, 42)
    await store.record_view(tenant_one, ItemKey(uuid=item_key.uuid, version=2), 42)

    assert await store.get_item_view_count(tenant_one, item_key) == 1
    assert await store.get_item_view_count(tenant_one, ItemKey(uuid=item_key.uuid, version=3)) == 0


async def test_delete_item_is_idempotent_and_scoped(store, tenant_one, tenant_two, institution_one, item_key):
    await store.record_view(tenant_one, item_key, 42)
    await store.record_view(tenant_two, item_key, 42)

    await store.delete_item_view_count_for_item(institution_one, item_key)
    await store.delete_item_view_count_for_item(institution_one, item_key)

    assert await store.get_item_view_count(tenant_one, item_key) == 0
    assert await store.get_item_view_count(tenant_two, item_key) == 1


async def test_delete_all_for_institution(store, tenant_one, tenant_two, institution_two, item_key):
    await store.record_view(tenant_one, item_key, 42)
    await store.record_view(tenant_two, item_key, 42)

    assert await store.delete_all_for_institution(institution_two) == 1
    assert await store.delete_all_for_institution(institution_two) == 0
    assert await store.get_item_view_count(tenant_one, item_key) == 1


async def test_concurrent_item_views(store, tenant_one, item_key):
    await asyncio.gather(*[store.record_view(tenant_one, item_key, 42) for _ in range(20)])
    assert await store.get_item_view_count(tenant_one, item_key) == 20


async def test_unbound_tenant_is_rejected(store, item_key):
    with pytest.raises(NoActiveTenantError):
        await store.record_view(TenantContext.unbound(), item_key, 42)
    with pytest.raises(NoActiveTenantError):
        await store.get_item_view_count_for_collection(TenantContext.unbound(), 42)


async def test_invalid_collection_id_is_rejected(store, tenant_one, item_key):
    with pytest.raises(ValueError):
        await store.record_view(tenant_one, item_key, None)
    assert await store.get_item_view_count(tenant_one, item_key) == 0
