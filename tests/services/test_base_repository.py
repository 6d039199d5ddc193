"""BaseRepository — generic CRUD, identifier whitelisting, bound values.

Invariants:
    - find_* return None (not raise) when no row matches
    - create returns the store-assigned id; update/delete report whether a row matched
    - Column names outside the model's table never reach SQL
    - Store rejections surface as ConstraintViolationError and leave the session usable
"""

import pytest

from userhub.core.errors import ConstraintViolationError, ValidationFailedError
from userhub.models.user import User
from userhub.repositories.base import BaseRepository


@pytest.fixture
def repo(test_db):
    return BaseRepository(test_db, User)


def _user(n: int) -> dict:
    return {"username": f"user{n}", "email": f"u{n}@x.com", "password": "hash"}


async def test_table_metadata_comes_from_model(repo):
    assert repo.table_name == "users"


async def test_create_returns_positive_id_and_row_is_readable(repo):
    new_id = await repo.create(_user(1))
    assert isinstance(new_id, int) and new_id > 0

    row = await repo.find_by_id(new_id)
    assert row["id"] == new_id
    assert row["username"] == "user1"
    assert row["created_at"] is not None
    assert row["updated_at"] is not None


async def test_find_by_id_missing_returns_none(repo):
    assert await repo.find_by_id(999) is None


async def test_find_all_honours_limit_and_offset(repo):
    ids = [await repo.create(_user(n)) for n in range(5)]

    page = await repo.find_all(limit=2, offset=1)
    assert [r["id"] for r in page] == ids[1:3]
    assert await repo.find_all(limit=10, offset=5) == []
    assert len(await repo.find_all(limit=100, offset=0)) == 5


async def test_update_changes_only_supplied_columns(repo):
    new_id = await repo.create(_user(1))

    assert await repo.update(new_id, {"email": "new@x.com"}) is True

    row = await repo.find_by_id(new_id)
    assert row["email"] == "new@x.com"
    assert row["username"] == "user1"


async def test_update_missing_row_returns_false(repo):
    assert await repo.update(999, {"email": "new@x.com"}) is False


async def test_update_with_identical_values_still_reports_match(repo):
    new_id = await repo.create(_user(1))
    assert await repo.update(new_id, {"username": "user1"}) is True


async def test_update_without_fields_is_rejected(repo):
    new_id = await repo.create(_user(1))
    with pytest.raises(ValidationFailedError):
        await repo.update(new_id, {})


async def test_delete_by_id(repo):
    new_id = await repo.create(_user(1))
    assert await repo.delete_by_id(new_id) is True
    assert await repo.find_by_id(new_id) is None
    assert await repo.delete_by_id(new_id) is False


async def test_unknown_column_rejected_before_sql(repo):
    with pytest.raises(ValueError, match="Unknown column"):
        await repo.create({"username": "x", "email": "x@x.com", "password": "h", "is_admin": 1})
    with pytest.raises(ValueError, match="Unknown column"):
        await repo.update(1, {"email = email; DROP TABLE users; --": "x"})
    with pytest.raises(ValueError, match="Unknown column"):
        await repo.find_one_by("1=1 OR username", "x")


async def test_primary_key_is_not_writable(repo):
    with pytest.raises(ValueError, match="store-assigned"):
        await repo.create({"id": 5, **_user(1)})
    with pytest.raises(ValueError, match="store-assigned"):
        await repo.update(5, {"id": 6})


async def test_unique_violation_becomes_constraint_violation(repo):
    await repo.create(_user(1))
    with pytest.raises(ConstraintViolationError) as exc:
        await repo.create(_user(1))
    assert exc.value.table == "users"
    assert exc.value.operation == "insert"

    # session rolled back and still usable
    assert len(await repo.find_all()) == 1


async def test_not_null_violation_becomes_constraint_violation(repo):
    with pytest.raises(ConstraintViolationError):
        await repo.create({"username": "nopass", "email": "n@x.com"})


async def test_raw_query_binds_values(repo):
    await repo.create(_user(1))
    await repo.create(_user(2))

    rows = await repo.raw_query(
        "SELECT username FROM users WHERE email = :email",
        {"email": "u2@x.com"},
    )
    assert rows == [{"username": "user2"}]

    # an injection attempt is just a non-matching value
    rows = await repo.raw_query(
        "SELECT username FROM users WHERE email = :email",
        {"email": "' OR '1'='1"},
    )
    assert rows == []
