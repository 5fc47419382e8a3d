from __future__ import annotations

import json
import os
from pathlib import Path
from typing import TYPE_CHECKING, Any, cast

import pytest
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine  # noqa: TC002

from bundlemint.adapters.sqlalchemy import SqlAlchemyIdentifierGenerator, shutdown, startup

os.environ.setdefault("DATABASE_URI", "sqlite+pysqlite:///:memory:")
os.environ.setdefault("BUNDLEMINT_BASE_URL", "https://server.test/fhir")

if TYPE_CHECKING:
    from collections.abc import Iterator


@pytest.fixture(scope="session")
def transaction_bundle_payload() -> dict[str, Any]:
    path = Path(__file__).resolve().parent / "data" / "transaction_bundle.json"
    with path.open() as handle:
        return cast(dict[str, Any], json.load(handle))


@pytest.fixture
def sqlite_engine() -> Iterator[Engine]:
    engine = create_engine("sqlite+pysqlite:///:memory:", future=True)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def sqlite_generator(sqlite_engine: Engine) -> Iterator[SqlAlchemyIdentifierGenerator]:
    startup(engine=sqlite_engine, force=True)
    try:
        yield SqlAlchemyIdentifierGenerator()
    finally:
        shutdown()
