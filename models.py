from sqlalchemy import Column, String, Float, Date, DateTime, Boolean, ForeignKey, Enum, Text
from sqlalchemy.orm import relationship, declarative_base
from datetime import datetime, timezone

from common.enum import TransactionTypeEnum, CategoryEnum


Base = declarative_base()


class User(Base):
    __tablename__ = "users"

    id = Column(String, primary_key=True, index=True)
    name = Column(String, nullable=False)
    # uniqueness is checked at registration, not enforced by the table
    email = Column(String, index=True, nullable=False)
    hashed_password = Column(String, nullable=False)
    is_avatar_image_set = Column(Boolean, default=False)
    avatar_image = Column(Text, default="")
    created_at = Column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc)
    )

    # No cascade: removing a user leaves its transactions behind
    transaction_rows = relationship("Transaction", back_populates="user")

    @property
    def transactions(self):
        return [t.id for t in self.transaction_rows]


class Transaction(Base):
    __tablename__ = "transactions"

    id = Column(String, primary_key=True, index=True)
    title = Column(String, nullable=False)
    amount = Column(Float, nullable=False)
    category = Column(Enum(CategoryEnum), nullable=False)
    description = Column(String, nullable=False)
    date = Column(Date, nullable=False)
    user_id = Column(String, ForeignKey("users.id"), index=True, nullable=False)
    transaction_type = Column(Enum(TransactionTypeEnum), nullable=False)
    created_at = Column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc)
    )
    updated_at = Column(DateTime(timezone=True), nullable=True)

    user = relationship("User", back_populates="transaction_rows")
