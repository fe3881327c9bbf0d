"""
TechNotes Backend — User Service Tests
========================================

What:  Tests for UserService (list, create, update, delete, lookups).
How:   Validation paths use a mock session (no DB calls expected); the
       uniqueness and ownership rules run against a real in-memory SQLite DB.

What we test:
    ✅ Missing/empty fields rejected before touching the database
    ✅ Duplicate username rejected on create; nothing new stored
    ✅ A user may keep its own username on update, never take another's
    ✅ Password re-hashed only when a new one is supplied
    ✅ Ownership guard blocks deleting a user with notes
    ✅ Storage-level UNIQUE constraint reported as ConflictError
    ✅ List output never carries the password hash
"""

from unittest.mock import AsyncMock, patch

import bcrypt
import pytest
from sqlalchemy import func, select

from technotes.exceptions import ConflictError, DataError, NotFoundError, ValidationError
from technotes.models.note import Note
from technotes.models.user import User
from technotes.services.user_service import UserService


def _password_matches(plaintext, hashed):
    return bcrypt.checkpw(plaintext.encode("utf-8"), hashed.encode("utf-8"))


async def _create(service, db, username="alice", password="pw1", roles=None):
    await service.create_user(db, username=username, password=password,
                              roles=roles or ["Employee"])
    result = await db.execute(select(User).where(User.username == username))
    return result.scalar_one()


class TestUserServiceValidation:
    """Input validation happens before any database access."""

    def setup_method(self):
        self.service = UserService()

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "username,password,roles",
        [
            (None, "pw1", ["Employee"]),
            ("alice", "", ["Employee"]),
            ("alice", "pw1", []),
            ("alice", "pw1", None),
            ("alice", "pw1", "Employee"),
        ],
    )
    async def test_create_missing_fields(self, mock_db_session, username, password, roles):
        with pytest.raises(ValidationError, match="All fields are required") as exc_info:
            await self.service.create_user(mock_db_session, username, password, roles)

        assert exc_info.value.status_code == 404
        mock_db_session.execute.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_update_requires_boolean_active(self, mock_db_session):
        with pytest.raises(ValidationError) as exc_info:
            await self.service.update_user(
                mock_db_session, user_id="abc", username="alice",
                roles=["Employee"], active="yes",
            )

        assert exc_info.value.status_code == 400
        mock_db_session.get.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_delete_requires_id(self, mock_db_session):
        with pytest.raises(ValidationError, match="User ID is required"):
            await self.service.delete_user(mock_db_session, user_id=None)

    @pytest.mark.asyncio
    async def test_get_user_malformed_id_skips_lookup(self, mock_db_session):
        assert await self.service.get_user(mock_db_session, "not-a-uuid") is None
        mock_db_session.get.assert_not_awaited()


class TestUserServiceCreate:

    def setup_method(self):
        self.service = UserService()

    @pytest.mark.asyncio
    async def test_create_user_success(self, db_session):
        message = await self.service.create_user(
            db_session, username="alice", password="pw1", roles=["Employee"]
        )

        assert message == "New user alice created"
        user = (await db_session.execute(select(User))).scalar_one()
        assert user.username == "alice"
        assert user.roles == ["Employee"]
        assert user.active is True
        assert user.password != "pw1"
        assert _password_matches("pw1", user.password)

    @pytest.mark.asyncio
    async def test_create_duplicate_username_rejected(self, db_session):
        await _create(self.service, db_session)

        with pytest.raises(ConflictError, match="Duplicate username") as exc_info:
            await self.service.create_user(
                db_session, username="alice", password="other", roles=["Manager"]
            )

        assert exc_info.value.status_code == 409
        count = (await db_session.execute(select(func.count(User.id)))).scalar()
        assert count == 1

    @pytest.mark.asyncio
    async def test_unique_constraint_catches_race(self, db_session):
        """If the pre-check misses a concurrent insert, the UNIQUE constraint still wins."""
        await _create(self.service, db_session)

        with patch.object(self.service, "_find_by_username", AsyncMock(return_value=None)):
            with pytest.raises(ConflictError, match="Duplicate username"):
                await self.service.create_user(
                    db_session, username="alice", password="pw2", roles=["Employee"]
                )

        count = (await db_session.execute(select(func.count(User.id)))).scalar()
        assert count == 1

    @pytest.mark.asyncio
    async def test_missing_record_after_write_is_data_error(self, db_session):
        with patch(
            "technotes.services.user_service.commit_or_conflict", AsyncMock()
        ):
            with pytest.raises(DataError, match="Invalid user data received") as exc_info:
                await self.service.create_user(
                    db_session, username="alice", password="pw1", roles=["Employee"]
                )

        assert exc_info.value.status_code == 404


class TestUserServiceUpdate:

    def setup_method(self):
        self.service = UserService()

    @pytest.mark.asyncio
    async def test_update_keeps_own_username(self, db_session):
        alice = await _create(self.service, db_session)
        old_hash = alice.password

        message = await self.service.update_user(
            db_session, user_id=str(alice.id), username="alice",
            roles=["Employee", "Manager"], active=False,
        )

        assert message == "alice updated"
        assert alice.roles == ["Employee", "Manager"]
        assert alice.active is False
        assert alice.password == old_hash

    @pytest.mark.asyncio
    async def test_update_rehashes_new_password(self, db_session):
        alice = await _create(self.service, db_session)

        await self.service.update_user(
            db_session, user_id=str(alice.id), username="alice",
            roles=["Employee"], active=True, password="new-secret",
        )

        assert _password_matches("new-secret", alice.password)
        assert not _password_matches("pw1", alice.password)

    @pytest.mark.asyncio
    async def test_update_to_taken_username_conflicts(self, db_session):
        await _create(self.service, db_session, username="alice")
        bob = await _create(self.service, db_session, username="bob")

        with pytest.raises(ConflictError, match="Duplicate username"):
            await self.service.update_user(
                db_session, user_id=str(bob.id), username="alice",
                roles=["Employee"], active=True,
            )

    @pytest.mark.asyncio
    async def test_update_unknown_user(self, db_session):
        with pytest.raises(NotFoundError, match="User not found") as exc_info:
            await self.service.update_user(
                db_session, user_id="00000000-0000-0000-0000-000000000000",
                username="ghost", roles=["Employee"], active=True,
            )

        assert exc_info.value.status_code == 400


class TestUserServiceDelete:

    def setup_method(self):
        self.service = UserService()

    @pytest.mark.asyncio
    async def test_delete_user_without_notes(self, db_session):
        alice = await _create(self.service, db_session)

        message = await self.service.delete_user(db_session, user_id=str(alice.id))

        assert message == f"Username alice with ID {alice.id} deleted"
        assert (await db_session.execute(select(User))).first() is None

    @pytest.mark.asyncio
    async def test_delete_user_with_notes_blocked(self, db_session):
        alice = await _create(self.service, db_session)
        db_session.add(Note(user_id=alice.id, title="T1", text="Fix printer"))
        await db_session.commit()

        with pytest.raises(ConflictError, match="User has assigned notes") as exc_info:
            await self.service.delete_user(db_session, user_id=str(alice.id))

        assert exc_info.value.status_code == 400
        assert await db_session.get(User, alice.id) is not None

    @pytest.mark.asyncio
    async def test_foreign_key_blocks_delete_when_check_misses_note(self, db_session):
        """A note assigned after the ownership check still blocks the delete."""
        alice = await _create(self.service, db_session)
        db_session.add(Note(user_id=alice.id, title="T1", text="Fix printer"))
        await db_session.commit()

        with patch.object(self.service, "_has_notes", AsyncMock(return_value=False)):
            with pytest.raises(ConflictError, match="User has assigned notes") as exc_info:
                await self.service.delete_user(db_session, user_id=str(alice.id))

        assert exc_info.value.status_code == 400
        count = (await db_session.execute(select(func.count(User.id)))).scalar()
        assert count == 1

    @pytest.mark.asyncio
    async def test_delete_unknown_user(self, db_session):
        with pytest.raises(NotFoundError, match="User not found"):
            await self.service.delete_user(db_session, user_id="not-a-uuid")


class TestUserServiceList:

    def setup_method(self):
        self.service = UserService()

    @pytest.mark.asyncio
    async def test_list_users_empty(self, db_session):
        with pytest.raises(NotFoundError, match="No users found") as exc_info:
            await self.service.list_users(db_session)

        assert exc_info.value.status_code == 404

    @pytest.mark.asyncio
    async def test_list_users_omits_password(self, db_session):
        await _create(self.service, db_session, username="alice")
        await _create(self.service, db_session, username="bob", roles=["Manager"])

        users = await self.service.list_users(db_session)

        assert {u.username for u in users} == {"alice", "bob"}
        for user in users:
            assert "password" not in user.model_dump()

    @pytest.mark.asyncio
    async def test_usernames_by_ids(self, db_session):
        alice = await _create(self.service, db_session, username="alice")
        bob = await _create(self.service, db_session, username="bob")

        usernames = await self.service.usernames_by_ids(db_session, [alice.id, bob.id, alice.id])

        assert usernames == {alice.id: "alice", bob.id: "bob"}

    @pytest.mark.asyncio
    async def test_usernames_by_ids_empty(self, mock_db_session):
        assert await self.service.usernames_by_ids(mock_db_session, []) == {}
        mock_db_session.execute.assert_not_awaited()
