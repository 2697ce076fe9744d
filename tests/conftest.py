import os
from pathlib import Path

import pytest

# Directory name -> marker applied to every test collected beneath it
_LAYER_MARKERS = {
    "domain": "domain",
    "application": "application",
    "bdd": "bdd",
    "integration": "integration",
}


def pytest_addoption(parser):
    parser.addoption(
        "--env",
        action="store",
        default="test",
        help="PROTEAN_ENV overlay the ordering domain is initialized with",
    )
    parser.addoption(
        "--keep-db",
        action="store_true",
        default=False,
        help="Leave the cart and order tables in place after the session",
    )


def pytest_sessionstart(session):
    """Initialize the ordering domain and leave its context pushed for the whole session.

    Tests can then reach the domain as `current_domain` without their own context.
    """
    os.environ["PROTEAN_ENV"] = session.config.option.env

    from ordering.domain import ordering

    ordering.init()
    ordering.domain_context().push()


def pytest_collection_modifyitems(config, items):
    for item in items:
        layers = Path(str(item.fspath)).parts
        for directory, marker in _LAYER_MARKERS.items():
            if directory in layers:
                item.add_marker(getattr(pytest.mark, marker))

        if "integration" in layers and not any(m.name == "fast" for m in item.iter_markers()):
            item.add_marker(pytest.mark.slow)


@pytest.fixture(scope="session", autouse=True)
def database(request):
    from ordering.domain import ordering
    from ordering.utils.db import drop_db, setup_db

    setup_db(ordering)
    yield
    if not request.config.getoption("--keep-db"):
        drop_db(ordering)


@pytest.fixture(autouse=True)
def reset_stores():
    """Empty every provider and the event store after each test."""
    yield

    from protean import current_domain

    for _, provider in current_domain.providers.items():
        provider._data_reset()
    current_domain.event_store.store._data_reset()
