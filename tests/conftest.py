import pytest
from kld_sampling.stats.ztable import ZTable, clear_shared_tables, generate_table, write_table
from kld_sampling.sampling.estimator import KLDSampler

@pytest.fixture(autouse=True)
def fresh_shared_tables():
    """Every test starts without any process-wide z-table loaded."""
    clear_shared_tables()
    yield
    clear_shared_tables()

@pytest.fixture
def ztable_values():
    return generate_table()

@pytest.fixture
def ztable_path(tmp_path, ztable_values):
    """A z-table resource written to a temp dir."""
    return write_table(tmp_path / "ztable.data", ztable_values)

@pytest.fixture
def ztable(ztable_values):
    return ZTable(ztable_values)

@pytest.fixture
def sampler(ztable):
    """A sampler that has not started a round yet."""
    return KLDSampler(ztable)
