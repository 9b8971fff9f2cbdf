"""API tests for records, dropdown options and the audit log against in-memory SQLite."""

import io
from contextlib import asynccontextmanager

import pytest
from httpx import ASGITransport, AsyncClient
from openpyxl import load_workbook
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from eazyliens.domain.coloring import DEFAULT_COLOR_RULES, SEED_COLOR_RULES, ColorRule, ColorRuleTable
from eazyliens.domain.entities import Role, User
from eazyliens.infrastructure.database import ListColorModel, get_db_session
from eazyliens.infrastructure.database.bootstrap import (
    create_schema,
    ensure_database_exists,
    load_color_rules,
    seed_color_rules,
    seed_superadmin,
)
from eazyliens.infrastructure.database.repositories import SQLAlchemyUserRepository
from eazyliens.infrastructure.dependencies import install_color_rules
from eazyliens.main import create_app

ROOT = {"X-Username": "root"}
BOSS = {"X-Username": "boss"}
ANA = {"X-Username": "ana"}


@asynccontextmanager
async def _api_client():
    """App wired to a fresh in-memory database holding one user per role."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    await create_schema(engine)

    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    await seed_superadmin(factory, "root")
    async with factory() as session:
        users = SQLAlchemyUserRepository(session)
        await users.create(User(username="boss", role=Role.ADMIN))
        await users.create(User(username="ana", role=Role.USUARIO))
        await users.create(User(username="gone", role=Role.ADMIN, active=False))
        await session.commit()

    async def override_session():
        async with factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app = create_app()
    app.dependency_overrides[get_db_session] = override_session
    transport = ASGITransport(app=app)
    try:
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            yield client
    finally:
        await engine.dispose()


# ── Identity ──


@pytest.mark.asyncio
async def test_missing_or_unknown_user_is_rejected():
    async with _api_client() as client:
        assert (await client.get("/api/v1/records")).status_code == 401
        assert (await client.get("/api/v1/records", headers={"X-Username": "nobody"})).status_code == 401
        assert (await client.get("/api/v1/records", headers={"X-Username": "gone"})).status_code == 401


@pytest.mark.asyncio
async def test_change_stream_requires_a_known_user():
    async with _api_client() as client:
        assert (await client.get("/api/v1/changes/stream")).status_code == 401
        response = await client.get("/api/v1/changes/stream", headers={"X-Username": "nobody"})
        assert response.status_code == 401


@pytest.mark.asyncio
async def test_users_me():
    async with _api_client() as client:
        response = await client.get("/api/v1/users/me", headers=BOSS)

    assert response.status_code == 200
    data = response.json()
    assert data["role"] == "Admin"
    assert "DELETE_RECORD" in data["capabilities"]
    assert "VIEW_LOGS" not in data["capabilities"]


# ── Records ──


@pytest.mark.asyncio
async def test_create_edit_and_search_records():
    async with _api_client() as client:
        first = (await client.post("/api/v1/records", headers=ANA)).json()
        second = (await client.post("/api/v1/records", headers=ANA)).json()
        assert first["values"]["T/F"] == "F"
        assert first["values"]["Name"] == ""

        response = await client.patch(
            f"/api/v1/records/{first['id']}/fields",
            json={"column": "Name", "value": "Maria 100%_Lopez"},
            headers=ANA,
        )
        assert response.status_code == 200
        assert response.json()["values"]["Name"] == "Maria 100%_Lopez"

        page = (await client.get("/api/v1/records", params={"page_size": 10}, headers=ANA)).json()
        assert [r["id"] for r in page["items"]] == [second["id"], first["id"]]
        assert page["total"] == 2

        page = (await client.get("/api/v1/records", params={"search": "LOPEZ"}, headers=ANA)).json()
        assert [r["id"] for r in page["items"]] == [first["id"]]

        # LIKE wildcards in the term match literally
        page = (await client.get("/api/v1/records", params={"search": "0%_l"}, headers=ANA)).json()
        assert page["total"] == 1
        page = (await client.get("/api/v1/records", params={"search": "%"}, headers=ANA)).json()
        assert page["total"] == 1


@pytest.mark.asyncio
async def test_paging():
    async with _api_client() as client:
        for _ in range(5):
            await client.post("/api/v1/records", headers=ANA)
        page = (
            await client.get("/api/v1/records", params={"page": 2, "page_size": 2}, headers=ANA)
        ).json()

    assert page["total"] == 5
    assert page["page"] == 2
    assert [r["id"] for r in page["items"]] == [1]


@pytest.mark.asyncio
async def test_update_unknown_column_is_422():
    async with _api_client() as client:
        record = (await client.post("/api/v1/records", headers=ANA)).json()
        response = await client.patch(
            f"/api/v1/records/{record['id']}/fields",
            json={"column": "Salary", "value": "1"},
            headers=ANA,
        )
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_value_longer_than_the_column_is_400():
    async with _api_client() as client:
        record = (await client.post("/api/v1/records", headers=ANA)).json()
        response = await client.patch(
            f"/api/v1/records/{record['id']}/fields",
            json={"column": "Name", "value": "x" * 300},
            headers=ANA,
        )
        assert response.status_code == 400
        assert "255" in response.json()["detail"]
        stored = (await client.get(f"/api/v1/records/{record['id']}", headers=ANA)).json()
    assert stored["values"]["Name"] == ""


@pytest.mark.asyncio
async def test_get_missing_record_is_404():
    async with _api_client() as client:
        assert (await client.get("/api/v1/records/999", headers=ANA)).status_code == 404


@pytest.mark.asyncio
async def test_colors_and_cell_colors():
    async with _api_client() as client:
        record = (await client.post("/api/v1/records", headers=ANA)).json()
        await client.patch(
            f"/api/v1/records/{record['id']}/fields",
            json={"column": "Law Firm", "value": "Pish & Pish"},
            headers=ANA,
        )

        response = await client.put(
            f"/api/v1/records/{record['id']}/colors",
            json={"colors": {"Law Firm": "#123456", "Notes": "#90ee90"}},
            headers=ANA,
        )
        assert response.status_code == 200
        assert response.json()["bg_color"] == {"Notes": "#90EE90"}

        colors = (await client.get(f"/api/v1/records/{record['id']}/cell-colors", headers=ANA)).json()

    assert colors["Law Firm"] == {
        "background": "#ADD8E6",
        "text": "#000000",
        "paintable": False,
        "source": "fixed",
    }
    assert colors["Notes"]["background"] == "#90EE90"
    assert colors["Notes"]["source"] == "manual"
    assert colors["Date"]["source"] == "date"
    assert colors["Name"]["source"] == "default"


@pytest.mark.asyncio
async def test_invalid_color_is_422():
    async with _api_client() as client:
        record = (await client.post("/api/v1/records", headers=ANA)).json()
        response = await client.put(
            f"/api/v1/records/{record['id']}/colors",
            json={"colors": {"Notes": "green"}},
            headers=ANA,
        )
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_delete_needs_admin():
    async with _api_client() as client:
        record = (await client.post("/api/v1/records", headers=ANA)).json()

        assert (await client.delete(f"/api/v1/records/{record['id']}", headers=ANA)).status_code == 403
        assert (await client.delete(f"/api/v1/records/{record['id']}", headers=BOSS)).status_code == 204
        assert (await client.get(f"/api/v1/records/{record['id']}", headers=ANA)).status_code == 404
        assert (await client.delete(f"/api/v1/records/{record['id']}", headers=BOSS)).status_code == 404


@pytest.mark.asyncio
async def test_export_returns_workbook():
    async with _api_client() as client:
        record = (await client.post("/api/v1/records", headers=ANA)).json()
        await client.patch(
            f"/api/v1/records/{record['id']}/fields",
            json={"column": "Type", "value": "Surgery"},
            headers=ANA,
        )
        response = await client.get("/api/v1/records/export", headers=ANA)

    assert response.status_code == 200
    assert response.headers["content-type"].startswith(
        "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
    )
    ws = load_workbook(io.BytesIO(response.content)).active
    assert ws.max_row == 2
    assert "Surgery" in [cell.value for cell in ws[2]]


# ── Dropdown options ──


@pytest.mark.asyncio
async def test_dropdown_option_administration():
    async with _api_client() as client:
        created = await client.post(
            "/api/v1/dropdown-options", json={"column": "Status", "value": "Open"}, headers=BOSS
        )
        assert created.status_code == 201
        row_id = created.json()["id"]

        duplicate = await client.post(
            "/api/v1/dropdown-options", json={"column": "Status", "value": " open "}, headers=BOSS
        )
        assert duplicate.status_code == 409

        forbidden = await client.post(
            "/api/v1/dropdown-options", json={"column": "Status", "value": "Closed"}, headers=ANA
        )
        assert forbidden.status_code == 403

        renamed = await client.put(
            f"/api/v1/dropdown-options/{row_id}",
            json={"column": "Status", "value": "Opened"},
            headers=BOSS,
        )
        assert renamed.json()["values"]["Status"] == "Opened"

        rows = (await client.get("/api/v1/dropdown-options", headers=ANA)).json()
        assert [row["values"]["Status"] for row in rows] == ["Opened"]

        cleared = await client.delete(f"/api/v1/dropdown-options/{row_id}/Status", headers=BOSS)
        assert cleared.status_code == 200
        assert cleared.json()["values"]["Status"] is None


# ── Audit log ──


@pytest.mark.asyncio
async def test_audit_log_records_mutations():
    async with _api_client() as client:
        record = (await client.post("/api/v1/records", headers=ANA)).json()
        await client.patch(
            f"/api/v1/records/{record['id']}/fields",
            json={"column": "Status", "value": "Open"},
            headers=ANA,
        )

        assert (await client.get("/api/v1/audit-logs", headers=BOSS)).status_code == 403
        entries = (await client.get("/api/v1/audit-logs", headers=ROOT)).json()

    assert [e["action"] for e in entries] == ["UPDATE", "INSERT"]
    assert entries[0]["column"] == "Status"
    assert entries[0]["new_value"] == "Open"
    assert entries[0]["username"] == "ana"


# ── Bootstrap ──


@pytest.mark.asyncio
async def test_seed_superadmin_is_idempotent():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    try:
        await create_schema(engine)
        factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

        first = await seed_superadmin(factory, " admin ")
        second = await seed_superadmin(factory, "admin")

        assert first.role == Role.SUPERADMIN
        assert second.id == first.id
        assert await seed_superadmin(factory, "  ") is None
    finally:
        await engine.dispose()


@pytest.mark.asyncio
async def test_ensure_database_exists_ignores_sqlite():
    await ensure_database_exists("sqlite:///./eazyliens.db")


@pytest.mark.asyncio
async def test_color_rules_are_seeded_once_and_loaded():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    try:
        await create_schema(engine)
        factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

        assert await seed_color_rules(factory) == len(SEED_COLOR_RULES)
        assert await seed_color_rules(factory) == 0

        async with factory() as session:
            session.add(ListColorModel(column_name="Status", value="Closed", bg_color="#8b5cf6", text_color="#ffffff"))
            session.add(ListColorModel(column_name="Salary", value="1", bg_color="#FF0000", text_color="#FFFFFF"))
            session.add(ListColorModel(column_name="Type", value="MRI", bg_color="red", text_color="#FFFFFF"))
            await session.commit()

        rules = await load_color_rules(factory)
        assert len(rules) == len(SEED_COLOR_RULES) + 1
        assert rules.lookup("Law Firm", "Pish & Pish").background == "#ADD8E6"
        assert rules.lookup("Status", "Closed").background == "#8B5CF6"
        assert rules.lookup("Type", "MRI") is None
    finally:
        await engine.dispose()


# ── Color rules ──


@pytest.mark.asyncio
async def test_color_rules_endpoint_serves_installed_rules():
    async with _api_client() as client:
        assert (await client.get("/api/v1/color-rules")).status_code == 401

        response = await client.get("/api/v1/color-rules", headers=ANA)
        assert response.status_code == 200
        assert {(r["column"], r["value"]) for r in response.json()} == {
            ("Law Firm", "Pish & Pish"),
            ("Type", "Surgery"),
        }

        install_color_rules(ColorRuleTable([ColorRule("Status", "Closed", "#8B5CF6", "#FFFFFF")]))
        try:
            rules = (await client.get("/api/v1/color-rules", headers=ANA)).json()
            record = (await client.post("/api/v1/records", headers=ANA)).json()
            await client.patch(
                f"/api/v1/records/{record['id']}/fields",
                json={"column": "Type", "value": "Surgery"},
                headers=ANA,
            )
            colors = (await client.get(f"/api/v1/records/{record['id']}/cell-colors", headers=ANA)).json()
        finally:
            install_color_rules(DEFAULT_COLOR_RULES)

    assert rules == [{"column": "Status", "value": "Closed", "background": "#8B5CF6", "text": "#FFFFFF"}]
    assert colors["Type"]["paintable"] is True
