import pytest

from kohakuipam.exceptions import CapacityError, DocumentError
from kohakuipam.services.reconcile import ReconcileService
from kohakuipam.storage.documents import load_table, save_table

from tests.utils import make_table, range_allocation, range_pool


@pytest.fixture
def table_path(tmp_path):
    path = str(tmp_path / "allocations.yaml")
    save_table(path, make_table({"dc1": ["c1", "c2"]}), backup=False)
    return path


@pytest.fixture
def pool_path(tmp_path):
    path = tmp_path / "pool.yaml"
    path.write_text(
        "name: pool1\n"
        "datacenters:\n"
        "  dc1:\n"
        "    type: range\n"
        "    poolCidr: 10.0.0.0/28\n"
        "    allocationRange: 4\n",
        encoding="utf-8",
    )
    return str(path)


def test_apply_saves_table(tmp_path, table_path, pool_path):
    result = ReconcileService(table_path).apply_pool_file(pool_path)

    assert result.pool_name == "pool1"
    assert result.changed
    assert result.saved_to == table_path
    assert [a.addresses for a in result.allocations] == [
        ["10.0.0.0-10.0.0.3"],
        ["10.0.0.4-10.0.0.7"],
    ]
    c1, c2 = load_table(table_path)["dc1"]
    assert c2.get_allocation("pool1").addresses == ["10.0.0.4-10.0.0.7"]
    assert (tmp_path / "allocations.yaml.bak").exists()


def test_apply_without_backup(tmp_path, table_path, pool_path):
    ReconcileService(table_path, backup=False).apply_pool_file(pool_path)
    assert not (tmp_path / "allocations.yaml.bak").exists()


def test_dry_run_saves_nothing(table_path, pool_path):
    before = load_table(table_path)

    result = ReconcileService(table_path).apply_pool_file(pool_path, dry_run=True)

    assert result.dry_run
    assert len(result.allocations) == 2
    assert result.saved_to is None
    assert load_table(table_path) == before


def test_reapply_is_noop_and_does_not_save(tmp_path, table_path, pool_path):
    service = ReconcileService(table_path)
    service.apply_pool_file(pool_path)
    (tmp_path / "allocations.yaml.bak").unlink()

    result = service.apply_pool_file(pool_path)

    assert not result.changed
    assert result.saved_to is None
    assert not (tmp_path / "allocations.yaml.bak").exists()


def test_output_path_leaves_source_untouched(tmp_path, table_path, pool_path):
    before = load_table(table_path)
    output = str(tmp_path / "out.json")

    result = ReconcileService(table_path).apply_pool_file(pool_path, output_path=output)

    assert result.saved_to == output
    assert load_table(table_path) == before
    assert load_table(output)["dc1"][0].get_allocation("pool1") is not None


def test_engine_error_saves_nothing(tmp_path, table_path):
    before = load_table(table_path)
    service = ReconcileService(table_path)

    with pytest.raises(CapacityError):
        service.apply_pool(range_pool("pool1", dc1=("10.0.0.0/28", 9)))

    assert load_table(table_path) == before
    assert not (tmp_path / "allocations.yaml.bak").exists()


def test_missing_table_is_document_error(tmp_path, pool_path):
    with pytest.raises(DocumentError):
        ReconcileService(str(tmp_path / "nope.yaml")).apply_pool_file(pool_path)


def test_usage_for_pool_file(table_path, pool_path):
    save_table(
        table_path,
        make_table(
            {"dc1": [("c1", [range_allocation("pool1", "c1", "dc1", "10.0.0.0-10.0.0.3")]), "c2"]}
        ),
    )

    [usage] = ReconcileService(table_path).usage_for_pool_file(pool_path)

    assert usage.used_addresses == 4
    assert usage.pending_clusters == 1
