import enum


class TransactionTypeEnum(str, enum.Enum):
    CREDIT = "credit"
    EXPENSE = "expense"


class CategoryEnum(str, enum.Enum):
    GROCERIES = "Groceries"
    RENT = "Rent"
    SALARY = "Salary"
    TIP = "Tip"
    FOOD = "Food"
    MEDICAL = "Medical"
    UTILITIES = "Utilities"
    ENTERTAINMENT = "Entertainment"
    TRANSPORTATION = "Transportation"
    OTHER = "Other"


# Order used by the analytics breakdown
CATEGORIES = [c.value for c in CategoryEnum]
