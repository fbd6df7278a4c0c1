from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import Optional, List
from datetime import date as Date, datetime

from common.enum import TransactionTypeEnum, CategoryEnum


# Auth Schemas
class UserRegister(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    password: str = Field(..., min_length=1)


class UserLogin(BaseModel):
    # normalised the same way as at registration
    email: EmailStr
    password: str = Field(..., min_length=1)


class UserResponse(BaseModel):
    id: str
    name: str
    email: str
    is_avatar_image_set: bool = False
    avatar_image: str = ""
    transactions: List[str] = []
    created_at: datetime

    class Config:
        from_attributes = True


class UserInDB(UserResponse):
    hashed_password: str

    def public(self) -> UserResponse:
        """Strip the password hash"""
        return UserResponse(**self.model_dump(exclude={"hashed_password"}))


class PublicUser(BaseModel):
    id: str
    email: str
    username: str
    avatar_image: str = ""


class AuthResponse(BaseModel):
    success: bool = True
    message: str
    user: UserResponse


# User Schemas
class AvatarUpdate(BaseModel):
    image: str


class AvatarResponse(BaseModel):
    success: bool = True
    message: str = "Avatar updated"
    is_set: bool
    image: str


class UserListResponse(BaseModel):
    success: bool = True
    users: List[PublicUser]


# Transaction Schemas
class TransactionCreate(BaseModel):
    user_id: str = Field(..., min_length=1)
    title: str = Field(..., min_length=1, max_length=200)
    amount: float = Field(..., gt=0)
    description: str = Field(..., min_length=1)
    date: Date
    category: CategoryEnum
    transaction_type: TransactionTypeEnum


class TransactionUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    amount: Optional[float] = Field(None, gt=0)
    description: Optional[str] = Field(None, min_length=1)
    date: Optional[Date] = None
    category: Optional[CategoryEnum] = None
    transaction_type: Optional[TransactionTypeEnum] = None


class TransactionResponse(BaseModel):
    id: str
    title: str
    amount: float
    category: CategoryEnum
    description: str
    date: Date
    user_id: str
    transaction_type: TransactionTypeEnum
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class TransactionFilter(BaseModel):
    user_id: str = Field(..., min_length=1)
    type: str = "all"
    frequency: str = "7"
    start_date: Optional[Date] = None
    end_date: Optional[Date] = None

    @field_validator("type")
    @classmethod
    def check_type(cls, v: str) -> str:
        if v != "all" and v not in [t.value for t in TransactionTypeEnum]:
            raise ValueError("type must be 'all', 'credit' or 'expense'")
        return v

    @field_validator("frequency")
    @classmethod
    def check_frequency(cls, v: str) -> str:
        if v == "custom" or (v.isdigit() and int(v) > 0):
            return v
        raise ValueError("frequency must be a number of days or 'custom'")


class TransactionEnvelope(BaseModel):
    success: bool = True
    message: str
    transaction: Optional[TransactionResponse] = None


class TransactionListResponse(BaseModel):
    success: bool = True
    transactions: List[TransactionResponse]


class MessageResponse(BaseModel):
    success: bool = True
    message: str


# Dashboard Schemas
class CategoryBreakdown(BaseModel):
    category: str
    income: float = 0.0
    expense: float = 0.0
    income_percent: float = 0.0
    expense_percent: float = 0.0


class AnalyticsReport(BaseModel):
    total_transactions: int
    income_count: int
    expense_count: int
    income_count_percent: float
    expense_count_percent: float
    total_income: float
    total_expense: float
    total_turnover: float
    income_turnover_percent: float
    expense_turnover_percent: float
    categories: List[CategoryBreakdown]
    income_by_category: List[CategoryBreakdown]
    expense_by_category: List[CategoryBreakdown]


class AnalyticsResponse(BaseModel):
    success: bool = True
    analytics: AnalyticsReport
