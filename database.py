"""Storage backends.

Both stores expose the same record-level methods and hand back pydantic
records (``UserInDB`` / ``TransactionResponse``), so services never touch
files or sessions directly.

``JsonFileStore`` keeps two JSON arrays on disk and rewrites the whole file
on every change. There is no locking: two writers racing on the same file
lose one update. ``SqlStore`` keeps the same data in SQLAlchemy tables and
derives a user's transaction ids from the owner index instead of caching
them on the user.
"""
import json
import logging
import os
import tempfile
from functools import lru_cache
from pathlib import Path
from typing import List, Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import make_url
from sqlalchemy.orm import sessionmaker

from config import settings
from models import Base, User, Transaction
from schemas import UserInDB, TransactionResponse

logger = logging.getLogger(__name__)

USERS_FILENAME = "users.json"
TRANSACTIONS_FILENAME = "transactions.json"


class JsonFileStore:
    def __init__(self, data_dir: str):
        self.data_dir = Path(data_dir)
        self.users_file = self.data_dir / USERS_FILENAME
        self.transactions_file = self.data_dir / TRANSACTIONS_FILENAME

    # ---------------- FILE HELPERS ---------------- #

    def _read(self, path: Path) -> list:
        """Load a JSON array, healing a missing or empty file to []"""
        self.data_dir.mkdir(parents=True, exist_ok=True)
        raw = path.read_text(encoding="utf-8") if path.exists() else ""
        if not raw.strip():
            logger.info("Initialising empty data file %s", path)
            self._write(path, [])
            return []
        return json.loads(raw)

    def _write(self, path: Path, data: list) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp = tempfile.NamedTemporaryFile(
            "w", delete=False, dir=str(path.parent), encoding="utf-8", suffix=".tmp"
        )
        tmppath = Path(tmp.name)
        try:
            with tmp:
                json.dump(data, tmp, ensure_ascii=False, indent=2)
                tmp.flush()
                os.fsync(tmp.fileno())
            tmppath.replace(path)
        except Exception:
            tmppath.unlink(missing_ok=True)
            raise

    def _read_users(self) -> List[UserInDB]:
        return [UserInDB.model_validate(u) for u in self._read(self.users_file)]

    def _write_users(self, users: List[UserInDB]) -> None:
        self._write(self.users_file, [u.model_dump(mode="json") for u in users])

    def _read_transactions(self) -> List[TransactionResponse]:
        return [TransactionResponse.model_validate(t) for t in self._read(self.transactions_file)]

    def _write_transactions(self, transactions: List[TransactionResponse]) -> None:
        self._write(self.transactions_file, [t.model_dump(mode="json") for t in transactions])

    # ---------------- USERS ---------------- #

    def list_users(self) -> List[UserInDB]:
        return self._read_users()

    def get_user(self, user_id: str) -> Optional[UserInDB]:
        return next((u for u in self._read_users() if u.id == user_id), None)

    def find_user_by_email(self, email: str) -> Optional[UserInDB]:
        return next((u for u in self._read_users() if u.email == email), None)

    def add_user(self, user: UserInDB) -> None:
        users = self._read_users()
        users.append(user)
        self._write_users(users)

    def save_user(self, user: UserInDB) -> None:
        users = [user if u.id == user.id else u for u in self._read_users()]
        self._write_users(users)

    # ---------------- TRANSACTIONS ---------------- #

    def list_transactions(self, user_id: str) -> List[TransactionResponse]:
        # oldest date first, ties in insertion order
        return sorted(
            (t for t in self._read_transactions() if t.user_id == user_id),
            key=lambda t: t.date
        )

    def get_transaction(self, transaction_id: str) -> Optional[TransactionResponse]:
        return next((t for t in self._read_transactions() if t.id == transaction_id), None)

    def add_transaction(self, transaction: TransactionResponse) -> None:
        transactions = self._read_transactions()
        transactions.append(transaction)
        self._write_transactions(transactions)

        # keep the owner's cached id list in sync
        users = self._read_users()
        for user in users:
            if user.id == transaction.user_id:
                user.transactions.append(transaction.id)
        self._write_users(users)

    def save_transaction(self, transaction: TransactionResponse) -> None:
        transactions = [
            transaction if t.id == transaction.id else t
            for t in self._read_transactions()
        ]
        self._write_transactions(transactions)

    def delete_transaction(self, transaction: TransactionResponse) -> None:
        transactions = [t for t in self._read_transactions() if t.id != transaction.id]
        self._write_transactions(transactions)

        users = self._read_users()
        for user in users:
            if user.id == transaction.user_id:
                user.transactions = [i for i in user.transactions if i != transaction.id]
        self._write_users(users)


class SqlStore:
    def __init__(self, database_url: str):
        url = make_url(database_url)
        connect_args = {}
        if url.get_backend_name() == "sqlite":
            connect_args = {"check_same_thread": False}
            if url.database and url.database != ":memory:":
                Path(url.database).parent.mkdir(parents=True, exist_ok=True)

        self.engine = create_engine(
            database_url,
            connect_args=connect_args,
            pool_pre_ping=True,
        )
        self.SessionLocal = sessionmaker(
            autocommit=False,
            autoflush=False,
            bind=self.engine
        )
        Base.metadata.create_all(bind=self.engine)

    # ---------------- USERS ---------------- #

    def list_users(self) -> List[UserInDB]:
        with self.SessionLocal() as db:
            return [UserInDB.model_validate(u) for u in db.query(User).all()]

    def get_user(self, user_id: str) -> Optional[UserInDB]:
        with self.SessionLocal() as db:
            user = db.query(User).filter(User.id == user_id).first()
            return UserInDB.model_validate(user) if user else None

    def find_user_by_email(self, email: str) -> Optional[UserInDB]:
        with self.SessionLocal() as db:
            user = db.query(User).filter(User.email == email).first()
            return UserInDB.model_validate(user) if user else None

    def add_user(self, user: UserInDB) -> None:
        with self.SessionLocal() as db:
            db.add(User(**user.model_dump(exclude={"transactions"})))
            db.commit()

    def save_user(self, user: UserInDB) -> None:
        with self.SessionLocal() as db:
            row = db.query(User).filter(User.id == user.id).first()
            if row is None:
                return
            row.name = user.name
            row.email = user.email
            row.hashed_password = user.hashed_password
            row.is_avatar_image_set = user.is_avatar_image_set
            row.avatar_image = user.avatar_image
            db.commit()

    # ---------------- TRANSACTIONS ---------------- #

    def list_transactions(self, user_id: str) -> List[TransactionResponse]:
        with self.SessionLocal() as db:
            rows = db.query(Transaction).filter(
                Transaction.user_id == user_id
            ).order_by(Transaction.date, Transaction.created_at).all()
            return [TransactionResponse.model_validate(t) for t in rows]

    def get_transaction(self, transaction_id: str) -> Optional[TransactionResponse]:
        with self.SessionLocal() as db:
            row = db.query(Transaction).filter(Transaction.id == transaction_id).first()
            return TransactionResponse.model_validate(row) if row else None

    def add_transaction(self, transaction: TransactionResponse) -> None:
        with self.SessionLocal() as db:
            db.add(Transaction(**transaction.model_dump()))
            db.commit()

    def save_transaction(self, transaction: TransactionResponse) -> None:
        with self.SessionLocal() as db:
            row = db.query(Transaction).filter(Transaction.id == transaction.id).first()
            if row is None:
                return
            for field, value in transaction.model_dump(exclude={"id", "user_id", "created_at"}).items():
                setattr(row, field, value)
            db.commit()

    def delete_transaction(self, transaction: TransactionResponse) -> None:
        with self.SessionLocal() as db:
            db.query(Transaction).filter(Transaction.id == transaction.id).delete()
            db.commit()


def build_store(backend: str):
    if backend == "json":
        return JsonFileStore(settings.DATA_DIR)
    if backend == "sql":
        return SqlStore(settings.DATABASE_URL)
    raise ValueError(f"Unknown STORAGE_BACKEND: {backend!r}")


@lru_cache()
def get_store():
    return build_store(settings.STORAGE_BACKEND)
