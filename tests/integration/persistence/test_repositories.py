"""Integration tests for the SQLAlchemy repositories."""

from uuid import uuid4

import pytest

from atelier.domain.client import Client, Measurement
from atelier.domain.shared import DuplicateKeyError
from atelier.domain.style import Style, StyleCategory
from atelier.domain.user import User
from atelier.infrastructure.persistence.sqlalchemy import (
    ClientRepositorySQLAlchemy,
    StyleRepositorySQLAlchemy,
    UserRepositorySQLAlchemy,
)
from atelier.infrastructure.persistence.sqlalchemy.models import (
    ClientModel,
    StyleModel,
    UserModel,
)

pytestmark = pytest.mark.integration


def make_style(name: str, category: StyleCategory = StyleCategory.WEDDING) -> Style:
    return Style(
        name=name,
        category=category,
        image_url=f"https://res.example.com/{name}.jpg",
        image_public_id=f"fashion_styles/{name}",
    )


class TestUserRepository:
    @pytest.mark.asyncio
    async def test_save_and_find(self, session):
        repo = UserRepositorySQLAlchemy(session)
        user = User.create(name="Ada", email="ada@x.com", password_hash="hash")

        await repo.save(user)

        found = await repo.find_by_email("ADA@x.com")
        assert found == user
        assert found.name == "Ada"
        assert found.created_at.tzinfo is not None
        assert await repo.exists_by_email("ada@x.com")
        assert await repo.find_by_id(uuid4()) is None

    @pytest.mark.asyncio
    async def test_duplicate_email(self, database):
        async with database.session() as session:
            repo = UserRepositorySQLAlchemy(session)
            await repo.save(User.create(name="A", email="a@x.com", password_hash="h"))
            await session.commit()

        async with database.session() as session:
            repo = UserRepositorySQLAlchemy(session)
            with pytest.raises(DuplicateKeyError) as exc_info:
                await repo.save(
                    User.create(name="B", email="A@x.com", password_hash="h"),
                )
            assert exc_info.value.field == "email"
            assert exc_info.value.value == "a@x.com"
            await session.rollback()
            assert await repo.count() == 1

    @pytest.mark.asyncio
    async def test_find_by_google_id(self, session):
        repo = UserRepositorySQLAlchemy(session)
        user = User.create(name="Ada", email="ada@x.com", google_id="g-1")
        await repo.save(user)

        assert await repo.find_by_google_id("g-1") == user
        assert await repo.find_by_google_id("g-2") is None

    @pytest.mark.asyncio
    async def test_rotate_refresh_token_is_conditional(self, session):
        repo = UserRepositorySQLAlchemy(session)
        user = User.create(name="Ada", email="ada@x.com", password_hash="hash")
        await repo.save(user)
        await repo.set_refresh_token(user.id, "first")

        assert await repo.rotate_refresh_token(user.id, "first", "second") is True
        # Replaying the old token matches nothing
        assert await repo.rotate_refresh_token(user.id, "first", "third") is False

        session.expire_all()
        assert (await repo.find_by_id(user.id)).refresh_token == "second"

    @pytest.mark.asyncio
    async def test_revoke(self, session):
        repo = UserRepositorySQLAlchemy(session)
        user = User.create(name="Ada", email="ada@x.com", password_hash="hash")
        await repo.save(user)
        await repo.set_refresh_token(user.id, "current")

        assert await repo.rotate_refresh_token(user.id, "current", None) is True

        session.expire_all()
        assert (await repo.find_by_id(user.id)).refresh_token is None

    @pytest.mark.asyncio
    async def test_save_does_not_touch_refresh_token(self, session):
        """Profile saves must not undo a concurrent rotation."""
        repo = UserRepositorySQLAlchemy(session)
        user = User.create(name="Ada", email="ada@x.com", password_hash="hash")
        await repo.save(user)
        await repo.set_refresh_token(user.id, "current")

        user.rename("Ada Obi")
        await repo.save(user)

        session.expire_all()
        found = await repo.find_by_id(user.id)
        assert found.name == "Ada Obi"
        assert found.refresh_token == "current"

    @pytest.mark.asyncio
    async def test_list_all_and_count(self, session):
        repo = UserRepositorySQLAlchemy(session)
        for i in range(3):
            await repo.save(
                User.create(name=f"U{i}", email=f"u{i}@x.com", password_hash="h"),
            )

        assert await repo.count() == 3
        assert {u.email for u in await repo.list_all()} == {
            "u0@x.com",
            "u1@x.com",
            "u2@x.com",
        }


class TestStyleRepository:
    @pytest.mark.asyncio
    async def test_search(self, session):
        repo = StyleRepositorySQLAlchemy(session)
        await repo.save(make_style("Lace Gown", StyleCategory.WEDDING))
        await repo.save(make_style("Agbada", StyleCategory.TRADITIONAL))
        await repo.save(make_style("lace top", StyleCategory.CASUAL))

        by_name = await repo.search(name="LACE")
        assert {s.name for s in by_name} == {"Lace Gown", "lace top"}

        by_category = await repo.search(category=StyleCategory.TRADITIONAL)
        assert [s.name for s in by_category] == ["Agbada"]

        both = await repo.search(category=StyleCategory.WEDDING, name="lace")
        assert [s.name for s in both] == ["Lace Gown"]

    @pytest.mark.asyncio
    async def test_search_escapes_wildcards(self, session):
        repo = StyleRepositorySQLAlchemy(session)
        await repo.save(make_style("Agbada"))

        assert await repo.search(name="%") == []

    @pytest.mark.asyncio
    async def test_find_by_ids_keeps_order(self, session):
        repo = StyleRepositorySQLAlchemy(session)
        a, b = make_style("A"), make_style("B")
        await repo.save(a)
        await repo.save(b)

        found = await repo.find_by_ids([b.id, uuid4(), a.id])

        assert [s.id for s in found] == [b.id, a.id]

    @pytest.mark.asyncio
    async def test_update_and_delete(self, session):
        repo = StyleRepositorySQLAlchemy(session)
        style = make_style("Agbada")
        await repo.save(style)

        style.replace_image("https://res.example.com/new.jpg", "new-id")
        await repo.save(style)
        assert (await repo.find_by_id(style.id)).image_public_id == "new-id"

        assert await repo.delete(style.id) is True
        assert await repo.delete(style.id) is False
        assert await repo.count() == 0


class TestClientRepository:
    @pytest.mark.asyncio
    async def test_save_and_find_with_measurements(self, session):
        repo = ClientRepositorySQLAlchemy(session)
        client = Client(
            name="Amaka",
            phone="0803 123 4567",
            measurements=[Measurement("Waist", "30in"), Measurement("Hip", "38in")],
        )

        await repo.save(client)

        found = await repo.find_by_id(client.id)
        assert found.measurements == [
            Measurement("Waist", "30in"),
            Measurement("Hip", "38in"),
        ]

    @pytest.mark.asyncio
    async def test_links_keep_order(self, session):
        styles = StyleRepositorySQLAlchemy(session)
        repo = ClientRepositorySQLAlchemy(session)
        first, second = make_style("First"), make_style("Second")
        await styles.save(first)
        await styles.save(second)
        client = Client(name="Amaka", phone="0803")
        await repo.save(client)

        client.link_style(second.id)
        await repo.save(client)
        client.link_style(first.id)
        await repo.save(client)

        assert (await repo.find_by_id(client.id)).style_ids == [second.id, first.id]

    @pytest.mark.asyncio
    async def test_unlink_on_save(self, session):
        styles = StyleRepositorySQLAlchemy(session)
        repo = ClientRepositorySQLAlchemy(session)
        style = make_style("Agbada")
        await styles.save(style)
        client = Client(name="Amaka", phone="0803", style_ids=[style.id])
        await repo.save(client)

        client.unlink_style(style.id)
        await repo.save(client)

        assert (await repo.find_by_id(client.id)).style_ids == []

    @pytest.mark.asyncio
    async def test_remove_style_everywhere(self, session):
        styles = StyleRepositorySQLAlchemy(session)
        repo = ClientRepositorySQLAlchemy(session)
        style, other = make_style("Agbada"), make_style("Kaftan")
        await styles.save(style)
        await styles.save(other)
        a = Client(name="A", phone="0803", style_ids=[style.id, other.id])
        b = Client(name="B", phone="0804", style_ids=[style.id])
        await repo.save(a)
        await repo.save(b)

        assert await repo.remove_style_everywhere(style.id) == 2

        assert (await repo.find_by_id(a.id)).style_ids == [other.id]
        assert (await repo.find_by_id(b.id)).style_ids == []

    @pytest.mark.asyncio
    async def test_search_case_insensitive(self, session):
        repo = ClientRepositorySQLAlchemy(session)
        await repo.save(Client(name="Amaka Eze", phone="0803", event_type="Wedding"))
        await repo.save(Client(name="Bola", phone="0804", event_type="Birthday"))

        assert [c.name for c in await repo.search(name="amaka")] == ["Amaka Eze"]
        assert [c.name for c in await repo.search(event_type="BIRTH")] == ["Bola"]
        assert len(await repo.search()) == 2

    @pytest.mark.asyncio
    async def test_delete(self, session):
        repo = ClientRepositorySQLAlchemy(session)
        client = Client(name="Amaka", phone="0803")
        await repo.save(client)

        assert await repo.delete(client.id) is True
        assert await repo.find_by_id(client.id) is None
        assert await repo.delete(client.id) is False


class TestEscapedTextColumns:
    """Free text is stored HTML-escaped and may outgrow its input limit."""

    @pytest.mark.parametrize(
        "column",
        [
            UserModel.__table__.c.name,
            ClientModel.__table__.c.name,
            ClientModel.__table__.c.event_type,
            StyleModel.__table__.c.name,
            StyleModel.__table__.c.description,
        ],
    )
    def test_column_has_no_length_limit(self, column):
        assert column.type.length is None

    @pytest.mark.asyncio
    async def test_fully_escaped_name_round_trips(self, session):
        repo = UserRepositorySQLAlchemy(session)
        name = "&#x27;" * 100
        user = User.create(name=name, email="quote@x.com", password_hash="hash")

        await repo.save(user)

        assert (await repo.find_by_id(user.id)).name == name
