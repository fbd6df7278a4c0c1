import logging
import uuid
from datetime import datetime, time, timedelta, timezone
from typing import List, Optional

from fastapi import HTTPException, status

from schemas import (
    UserRegister, UserLogin, UserInDB, UserResponse, PublicUser,
    TransactionCreate, TransactionUpdate, TransactionResponse, TransactionFilter,
)
from security import hash_password, check_password

logger = logging.getLogger(__name__)


def _user_not_found():
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail="User not found"
    )


def _transaction_not_found():
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail="Transaction not found"
    )


# ---------------- USERS ---------------- #

def create_user(store, user: UserRegister) -> UserResponse:
    if store.find_user_by_email(user.email):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="User already exists"
        )

    db_user = UserInDB(
        id=str(uuid.uuid4()),
        name=user.name,
        email=user.email,
        hashed_password=hash_password(user.password),
        is_avatar_image_set=False,
        avatar_image="",
        transactions=[],
        created_at=datetime.now(timezone.utc),
    )
    store.add_user(db_user)
    logger.info("Registered user %s", db_user.id)
    return db_user.public()


def authenticate_user(store, credentials: UserLogin) -> UserResponse:
    user = store.find_user_by_email(credentials.email)
    valid, new_hash = check_password(credentials.password, user.hashed_password) if user else (False, None)

    if not valid:
        logger.warning("Failed login for %s", credentials.email)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password"
        )

    if new_hash:
        user.hashed_password = new_hash
        store.save_user(user)
        logger.info("Rehashed password for user %s", user.id)

    return user.public()


def set_avatar(store, user_id: str, image: str) -> UserResponse:
    user = store.get_user(user_id)
    if not user:
        raise _user_not_found()

    user.is_avatar_image_set = True
    user.avatar_image = image
    store.save_user(user)
    return user.public()


def list_other_users(store, user_id: str) -> List[PublicUser]:
    return [
        PublicUser(
            id=u.id,
            email=u.email,
            username=u.name,
            avatar_image=u.avatar_image,
        )
        for u in store.list_users()
        if u.id != user_id
    ]


# ---------------- TRANSACTIONS ---------------- #

def add_transaction(store, data: TransactionCreate) -> TransactionResponse:
    # check the owner before writing anything
    if not store.get_user(data.user_id):
        raise _user_not_found()

    transaction = TransactionResponse(
        id=str(uuid.uuid4()),
        title=data.title,
        amount=data.amount,
        category=data.category,
        description=data.description,
        date=data.date,
        user_id=data.user_id,
        transaction_type=data.transaction_type,
        created_at=datetime.now(timezone.utc),
    )
    store.add_transaction(transaction)
    logger.info("Added transaction %s for user %s", transaction.id, data.user_id)
    return transaction


def filter_transactions(
        transactions: List[TransactionResponse],
        filters: TransactionFilter,
        now: Optional[datetime] = None
) -> List[TransactionResponse]:
    """Apply the type and frequency filters.

    A numeric frequency keeps transactions dated strictly after
    ``now - N days`` (dates count from local midnight). ``"custom"`` keeps
    ``start_date <= date <= end_date`` and is a no-op unless both bounds are
    given.
    """
    if filters.type != "all":
        transactions = [t for t in transactions if t.transaction_type.value == filters.type]

    if filters.frequency != "custom":
        try:
            cutoff = (now or datetime.now()) - timedelta(days=int(filters.frequency))
        except OverflowError:
            # window reaches past datetime.min: nothing is cut off
            cutoff = None
        if cutoff is not None:
            transactions = [
                t for t in transactions
                if datetime.combine(t.date, time.min) > cutoff
            ]
    elif filters.start_date and filters.end_date:
        transactions = [
            t for t in transactions
            if filters.start_date <= t.date <= filters.end_date
        ]

    return transactions


def get_transactions(
        store,
        filters: TransactionFilter,
        now: Optional[datetime] = None
) -> List[TransactionResponse]:
    if not store.get_user(filters.user_id):
        raise _user_not_found()

    return filter_transactions(store.list_transactions(filters.user_id), filters, now)


def update_transaction(store, transaction_id: str, data: TransactionUpdate) -> TransactionResponse:
    transaction = store.get_transaction(transaction_id)
    if not transaction:
        raise _transaction_not_found()

    # partial update: only fields sent in the request
    changes = data.model_dump(exclude_unset=True, exclude_none=True)
    transaction = transaction.model_copy(
        update={**changes, "updated_at": datetime.now(timezone.utc)}
    )
    store.save_transaction(transaction)
    logger.info("Updated transaction %s (%s)", transaction_id, ", ".join(sorted(changes)))
    return transaction


def delete_transaction(store, transaction_id: str, user_id: str) -> None:
    if not store.get_user(user_id):
        raise _user_not_found()

    transaction = store.get_transaction(transaction_id)
    if not transaction:
        raise _transaction_not_found()

    store.delete_transaction(transaction)
    logger.info("Deleted transaction %s", transaction_id)
