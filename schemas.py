# schemas.py
from enum import Enum
from pydantic import BaseModel, StrictFloat, confloat, constr
import datetime
from typing import Optional


class TransactionType(str, Enum):
    income = "income"
    expense = "expense"


class UserCreate(BaseModel):
    name: str = ""
    phone: constr(strip_whitespace=True, min_length=1)
    password: constr(min_length=1)

    class Config:
        extra = "forbid"


class UserLogin(BaseModel):
    phone: constr(strip_whitespace=True, min_length=1)
    password: constr(min_length=1)

    class Config:
        extra = "forbid"


class Message(BaseModel):
    message: str


class Me(BaseModel):
    phone: str


class ExpenseCreate(BaseModel):
    amount: confloat(ge=0, strict=True)
    category: str = ""
    description: str = ""
    type: TransactionType = TransactionType.expense
    date: Optional[datetime.date] = None

    class Config:
        extra = "forbid"


class ExpenseUpdate(BaseModel):
    amount: confloat(ge=0, strict=True)
    # fields left out of the body keep their stored value
    category: Optional[str] = None
    description: Optional[str] = None
    type: Optional[TransactionType] = None

    class Config:
        extra = "forbid"


class ExpenseOut(BaseModel):
    id: int
    user_id: int
    amount: float
    category: str
    description: str
    type: TransactionType
    date: datetime.date

    class Config:
        from_attributes = True


class GoalIn(BaseModel):
    goal: StrictFloat

    class Config:
        extra = "forbid"


class GoalOut(BaseModel):
    goal: Optional[float] = None


class LimitIn(BaseModel):
    limit: StrictFloat

    class Config:
        extra = "forbid"


class LimitOut(BaseModel):
    limit: Optional[float] = None


class ProfileUpdate(BaseModel):
    name: str = ""
    phone: constr(strip_whitespace=True, min_length=1)
    password: Optional[str] = None

    class Config:
        extra = "forbid"


class ProfileOut(BaseModel):
    name: str = ""
    phone: str

    class Config:
        from_attributes = True
