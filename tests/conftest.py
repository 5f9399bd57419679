"""
测试公共夹具：每个测试使用独立的 SQLite 文件库
"""
import pytest

from viewcount.db.database import build_engine, build_session_factory, create_schema
from viewcount.schemas.viewcount import InstitutionRef, ItemKey
from viewcount.core.tenant import TenantContext


@pytest.fixture
async def engine(tmp_path):
    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'viewcount.sqlite'}")
    await create_schema(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return build_session_factory(engine)


@pytest.fixture
def institution_one():
    return InstitutionRef(id=1, shortName="I1")


@pytest.fixture
def institution_two():
    return InstitutionRef(id=2, shortName="I2")


@pytest.fixture
def tenant_one(institution_one):
    return TenantContext.for_institution(institution_one)


@pytest.fixture
def tenant_two(institution_two):
    return TenantContext.for_institution(institution_two)


@pytest.fixture
def item_key():
    return ItemKey(uuid="abc-123", version=1)
