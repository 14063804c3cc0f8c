# tests/conftest.py
import pytest


@pytest.fixture
def cols():
    """Column names of the toy network in tests/toy_network.py."""
    return dict(
        id_col="station",
        date_col="date",
        x_col="x",
        y_col="y",
        alt_col="elev",
        target_col="tmean",
    )
