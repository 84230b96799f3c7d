from __future__ import annotations

from collections.abc import AsyncIterator

import pytest
from sqlalchemy import Column, Integer, MetaData, String, Table, func
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.pool import StaticPool
from sqlalchemy.sql.elements import True_

from modelmap import (
    Instance,
    StaleOrMissingRowError,
    changes,
    connection_scope,
    delete,
    insert,
    save,
    select,
    select_one,
    update,
)
from modelmap.adapters.sqlalchemy import (
    SQLAlchemyConnection,
    SQLAlchemyOperator,
    SQLAlchemyOperatorRegistry,
    build_default_registry,
    build_sqla_where,
    compile_delete,
    compile_insert,
    compile_select,
    compile_update,
)
from modelmap.operators import Operator

metadata = MetaData()

people = Table(
    "people",
    metadata,
    Column("id", Integer, primary_key=True),
    Column("name", String),
    Column("created_at", String),
)


@pytest.fixture()
async def engine() -> AsyncIterator[AsyncEngine]:
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(metadata.create_all)
        await conn.execute(
            people.insert(),
            [
                {"id": 1, "name": "Cam", "created_at": "2020-04-21"},
                {"id": 2, "name": "Sam", "created_at": "2019-01-11"},
                {"id": 3, "name": "Pam", "created_at": "2020-01-01"},
            ],
        )
    yield engine
    await engine.dispose()


@pytest.fixture()
def connection(engine: AsyncEngine) -> SQLAlchemyConnection:
    return SQLAlchemyConnection(engine)


def _sql(stmt) -> str:
    return " ".join(str(stmt).split())


# ── compiler ────────────────────────────────────────────────────


def test_compile_select() -> None:
    stmt = compile_select({"select": ["*"], "from": ["people"], "where": ("=", "id", 1)})
    assert _sql(stmt) == "SELECT * FROM people WHERE id = :id_1"


def test_compile_select_columns() -> None:
    stmt = compile_select({"select": ["id", "name"], "from": ["people"]})
    assert _sql(stmt) == "SELECT id, name FROM people"


def test_build_sqla_where_logical_nodes() -> None:
    clause = build_sqla_where(
        ("and", ("=", "a", 1), ("or", ("is_null", "b"), ("not", ("in", "c", [1, 2]))))
    )
    sql = _sql(clause)
    assert sql.startswith("a = :a_1 AND (b IS NULL OR")
    assert "NOT IN" in sql


def test_build_sqla_where_between() -> None:
    assert _sql(build_sqla_where(("between", "a", 1, 2))) == "a BETWEEN :a_1 AND :a_2"


def test_build_sqla_where_missing_clause() -> None:
    assert isinstance(build_sqla_where(None), True_)


def test_build_sqla_where_negated_operators() -> None:
    assert _sql(build_sqla_where(("not_like", "name", "S%"))) == "name NOT LIKE :name_1"
    not_between = _sql(build_sqla_where(("not_between", "a", 1, 2)))
    assert "NOT" in not_between
    assert "BETWEEN :a_1 AND :a_2" in not_between


def test_build_sqla_where_unsupported_operator() -> None:
    with pytest.raises(ValueError, match="Unsupported operator for SQLAlchemy: ="):
        build_sqla_where(("=", "id", 1), registry=SQLAlchemyOperatorRegistry())


def test_build_sqla_where_custom_operator() -> None:
    class CaseInsensitiveEqual(SQLAlchemyOperator):
        operator = Operator.EQ

        def apply(self, column, value):
            return func.lower(column) == func.lower(value)

    registry = build_default_registry()
    registry.register(CaseInsensitiveEqual())
    assert Operator.EQ in registry
    assert _sql(build_sqla_where(("=", "name", "SAM"), registry=registry)).startswith(
        "lower(name) = lower("
    )
    assert _sql(build_sqla_where(("=", "name", "SAM"))) == "name = :name_1"


def test_compile_write_statements() -> None:
    update_sql = _sql(
        compile_update({"update": "people", "set": {"name": "Sam"}, "where": ("=", "id", 1)})
    )
    assert update_sql == "UPDATE people SET name=:name WHERE id = :id_1"

    insert_sql = _sql(compile_insert({"insert_into": "people", "values": [{"id": 4}]}))
    assert insert_sql == "INSERT INTO people (id) VALUES (:id)"

    delete_sql = _sql(compile_delete({"delete_from": "people", "where": ("<", "id", 2)}))
    assert delete_sql == "DELETE FROM people WHERE id < :id_1"


# ── connection ──────────────────────────────────────────────────


@pytest.mark.asyncio()
async def test_select_through_engine(connection: SQLAlchemyConnection) -> None:
    rows = await select(
        "people", {"created_at": (">=", "2020-01-01")}, connection=connection
    )
    assert sorted(r["id"] for r in rows) == [1, 3]
    assert all(isinstance(r, Instance) for r in rows)


@pytest.mark.asyncio()
async def test_save_round_trip(connection: SQLAlchemyConnection) -> None:
    with connection_scope(connection):
        person = await select_one("people", {"id": 2})
        assert person is not None
        person["name"] = "Samantha"

        saved = await save(person)
        reloaded = await select_one("people", {"id": 2})

    assert changes(saved) == {}
    assert reloaded is not None
    assert reloaded["name"] == "Samantha"


@pytest.mark.asyncio()
async def test_save_missing_row(connection: SQLAlchemyConnection) -> None:
    ghost = Instance("people", {"id": 404, "name": "Ghost"})
    ghost["name"] = "Still a ghost"

    with pytest.raises(StaleOrMissingRowError):
        await save(ghost, connection=connection)


@pytest.mark.asyncio()
async def test_insert_update_delete(connection: SQLAlchemyConnection) -> None:
    with connection_scope(connection):
        assert await insert("people", [{"id": 4, "name": "Lam"}, {"id": 5, "name": "Tam"}]) == 2
        assert await update("people", {"name": ("like", "%am")}, {"created_at": "2021"}) == 5
        assert await delete("people", {"id": ("between", 4, 5)}) == 2
        remaining = await select("people", columns=["id"])

    assert sorted(r["id"] for r in remaining) == [1, 2, 3]


@pytest.mark.asyncio()
async def test_caller_managed_connection(engine: AsyncEngine) -> None:
    async with engine.connect() as conn:
        bound = SQLAlchemyConnection(conn)
        assert not bound.owns_transaction
        await update("people", {"id": 1}, {"name": "Rolled back"}, connection=bound)
        person = await select_one("people", {"id": 1}, connection=bound)
        assert person is not None
        assert person["name"] == "Rolled back"
        await conn.rollback()

    person = await select_one("people", {"id": 1}, connection=SQLAlchemyConnection(engine))
    assert person is not None
    assert person["name"] == "Cam"
