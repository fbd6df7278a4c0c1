from datetime import date, datetime

import pytest
from fastapi import HTTPException
from pydantic import ValidationError

import services
from common.enum import CategoryEnum, TransactionTypeEnum
from schemas import TransactionFilter, TransactionUpdate, UserRegister
from tests.conftest import make_transaction


def test_add_transaction_updates_user(store, alice):
    transaction = services.add_transaction(store, make_transaction(alice.id))

    assert transaction.created_at is not None
    assert transaction.updated_at is None
    assert store.get_user(alice.id).transactions == [transaction.id]
    assert store.get_transaction(transaction.id).title == "Lunch"


def test_add_transaction_unknown_user_writes_nothing(store, alice):
    users_before = store.users_file.read_text()

    with pytest.raises(HTTPException) as exc:
        services.add_transaction(store, make_transaction("missing"))

    assert exc.value.status_code == 404
    assert store.users_file.read_text() == users_before
    assert store.list_transactions("missing") == []
    assert store.get_user(alice.id).transactions == []


@pytest.mark.parametrize("field, value", [
    ("title", ""),
    ("description", ""),
    ("amount", 0),
    ("amount", -5),
    ("category", "Gambling"),
    ("transaction_type", "refund"),
])
def test_create_rejects_bad_fields(field, value):
    with pytest.raises(ValidationError):
        make_transaction("u1", **{field: value})


def test_list_by_type(store, alice):
    services.add_transaction(store, make_transaction(alice.id))
    services.add_transaction(store, make_transaction(
        alice.id, title="Pay", amount=1000,
        category=CategoryEnum.SALARY, transaction_type=TransactionTypeEnum.CREDIT,
    ))

    filters = TransactionFilter(user_id=alice.id, type="credit", frequency="custom")
    result = services.get_transactions(store, filters)

    assert [t.title for t in result] == ["Pay"]


def test_list_is_scoped_to_user(store, alice):
    services.add_transaction(store, make_transaction(alice.id))
    bob = services.create_user(store, UserRegister(
        name="Bob", email="b@x.com", password="pw"))

    filters = TransactionFilter(user_id=bob.id, frequency="custom")
    assert services.get_transactions(store, filters) == []


def test_list_unknown_user(store):
    with pytest.raises(HTTPException) as exc:
        services.get_transactions(store, TransactionFilter(user_id="missing"))
    assert exc.value.status_code == 404


def test_rolling_window_is_strict(store, alice):
    for day in (12, 13, 14, 20):
        services.add_transaction(store, make_transaction(
            alice.id, title=f"day {day}", date=date(2024, 3, day)))

    now = datetime(2024, 3, 20, 10, 0)
    filters = TransactionFilter(user_id=alice.id, frequency="7")
    result = services.get_transactions(store, filters, now=now)

    # cutoff is 2024-03-13 10:00, so the 13th (midnight) is out
    assert sorted(t.title for t in result) == ["day 14", "day 20"]


def test_custom_range_is_inclusive(store, alice):
    for day in (1, 10, 20, 21):
        services.add_transaction(store, make_transaction(
            alice.id, title=f"day {day}", date=date(2024, 5, day)))

    filters = TransactionFilter(
        user_id=alice.id, frequency="custom",
        start_date=date(2024, 5, 10), end_date=date(2024, 5, 20),
    )
    result = services.get_transactions(store, filters)

    assert sorted(t.title for t in result) == ["day 10", "day 20"]


def test_custom_without_bounds_keeps_everything(store, alice):
    services.add_transaction(store, make_transaction(alice.id, date=date(2001, 1, 1)))

    filters = TransactionFilter(user_id=alice.id, frequency="custom", start_date=date(2024, 1, 1))
    assert len(services.get_transactions(store, filters)) == 1


@pytest.mark.parametrize("frequency", ["", "0", "-7", "weekly"])
def test_bad_frequency(frequency):
    with pytest.raises(ValidationError):
        TransactionFilter(user_id="u1", frequency=frequency)


def test_bad_type():
    with pytest.raises(ValidationError):
        TransactionFilter(user_id="u1", type="income")


def test_partial_update(store, alice):
    created = services.add_transaction(store, make_transaction(alice.id))

    updated = services.update_transaction(
        store, created.id, TransactionUpdate(title="Dinner", amount=350.5)
    )

    assert updated.title == "Dinner"
    assert updated.amount == 350.5
    assert updated.description == created.description
    assert updated.category == created.category
    assert updated.updated_at is not None

    stored = store.get_transaction(created.id)
    assert stored.title == "Dinner"
    assert stored.date == created.date


def test_update_missing_transaction(store):
    with pytest.raises(HTTPException) as exc:
        services.update_transaction(store, "missing", TransactionUpdate(title="x"))
    assert exc.value.status_code == 404


def test_delete_transaction(store, alice):
    keep = services.add_transaction(store, make_transaction(alice.id, title="keep"))
    drop = services.add_transaction(store, make_transaction(alice.id, title="drop"))

    services.delete_transaction(store, drop.id, alice.id)

    assert store.get_transaction(drop.id) is None
    assert store.get_user(alice.id).transactions == [keep.id]

    with pytest.raises(HTTPException) as exc:
        services.delete_transaction(store, drop.id, alice.id)
    assert exc.value.status_code == 404


def test_delete_requires_user(store, alice):
    created = services.add_transaction(store, make_transaction(alice.id))

    with pytest.raises(HTTPException) as exc:
        services.delete_transaction(store, created.id, "missing")

    assert exc.value.status_code == 404
    assert store.get_transaction(created.id) is not None


def test_huge_rolling_window_keeps_everything(store, alice):
    services.add_transaction(store, make_transaction(alice.id, date=date(1970, 1, 1)))

    filters = TransactionFilter(user_id=alice.id, frequency="1000000")
    result = services.get_transactions(store, filters, now=datetime(2024, 3, 20))

    assert len(result) == 1
