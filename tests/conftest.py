from datetime import date

import pytest
from fastapi.testclient import TestClient

import services
from common.enum import CategoryEnum, TransactionTypeEnum
from database import JsonFileStore, get_store
from main import app
from schemas import UserRegister, TransactionCreate


@pytest.fixture
def store(tmp_path):
    return JsonFileStore(str(tmp_path / "data"))


@pytest.fixture
def client(store):
    app.dependency_overrides[get_store] = lambda: store
    with TestClient(app, raise_server_exceptions=False) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def alice(store):
    return services.create_user(
        store, UserRegister(name="Alice", email="a@x.com", password="pw123")
    )


def make_transaction(user_id, **overrides):
    data = dict(
        user_id=user_id,
        title="Lunch",
        amount=200,
        description="Team lunch",
        date=date(2024, 1, 15),
        category=CategoryEnum.FOOD,
        transaction_type=TransactionTypeEnum.EXPENSE,
    )
    data.update(overrides)
    return TransactionCreate(**data)
