import pytest

from datalayer.core.backend import BackendSelector
from datalayer.core.storage import HostEnvironment


@pytest.fixture
def temp_data_dir(tmp_path):
    """Create a temporary directory for store data."""
    data_dir = tmp_path / "store_data"
    data_dir.mkdir()
    return data_dir


@pytest.mark.asyncio
async def test_local_storage_persistence(temp_data_dir):
    """Records in localStorage are preserved across restarts."""
    # 1. Start host A
    host_a = HostEnvironment.create(temp_data_dir)
    backend_a = BackendSelector().select_backend("localStorage").build(host_a)

    await backend_a.create({"id": "alice", "role": "admin"})
    await backend_a.create({"name": "bob"}, {"key": "bob"})
    await backend_a.update("carol", {"role": "viewer"})
    await backend_a.remove("bob")

    # 2. Stop host A
    host_a.close()
    del backend_a, host_a

    # 3. Start host B on the same directory
    host_b = HostEnvironment.create(temp_data_dir)
    backend_b = BackendSelector().build(host_b)

    assert await backend_b.get("alice") == {"data": {"id": "alice", "role": "admin"}}
    assert await backend_b.get("bob") == {"data": None}
    assert await backend_b.get("carol") == {"data": {"role": "viewer", "id": "carol"}}

    # list follows first-write order in the SQLite namespace
    result = await backend_b.list()
    assert result["data"]["results"] == [
        {"id": "alice", "role": "admin"},
        {"role": "viewer", "id": "carol"},
    ]

    # 4. Clear and restart again
    await backend_b.remove_all()
    host_b.close()

    host_c = HostEnvironment.create(temp_data_dir)
    backend_c = BackendSelector().build(host_c)
    assert await backend_c.list() == {"data": {"results": []}}
    host_c.close()


@pytest.mark.asyncio
async def test_session_storage_is_not_persisted(temp_data_dir):
    """sessionStorage lasts only as long as its host."""
    host_a = HostEnvironment.create(temp_data_dir)
    backend_a = BackendSelector().select_backend("sessionStorage").build(host_a)
    await backend_a.create({"id": "a"})
    assert await backend_a.get("a") == {"data": {"id": "a"}}
    host_a.close()

    host_b = HostEnvironment.create(temp_data_dir)
    backend_b = BackendSelector().select_backend("sessionStorage").build(host_b)
    assert await backend_b.get("a") == {"data": None}

    # nothing leaked into the persistent namespace either
    local = BackendSelector().build(host_b)
    assert await local.get("a") == {"data": None}
    host_b.close()


@pytest.mark.asyncio
async def test_backends_share_namespace(temp_data_dir):
    """Two backends on the same namespace see each other's writes."""
    host = HostEnvironment.create(temp_data_dir)
    selector = BackendSelector()
    writer = selector.build(host)
    reader = selector.build(host)

    await writer.create({"id": "shared", "v": 1})
    assert await reader.get("shared") == {"data": {"id": "shared", "v": 1}}
    host.close()
