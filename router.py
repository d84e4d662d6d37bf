# router.py
from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from auth import get_current_user_id
from database import get_db, Expense, Goal, Limit
from errors import NotFoundError
from schemas import (
    ExpenseCreate,
    ExpenseUpdate,
    ExpenseOut,
    GoalIn,
    GoalOut,
    LimitIn,
    LimitOut,
    Message,
)
import store


router = APIRouter()


def parse_record_id(value: str) -> Optional[int]:
    """Return ``value`` as a record id, or None when no record can have it."""
    try:
        record_id = int(value)
    except ValueError:
        return None
    # ids are positive 64-bit integers
    if not 0 < record_id < 2**63:
        return None
    return record_id


@router.get("/expenses", response_model=List[ExpenseOut])
async def get_expenses(
    db: Session = Depends(get_db), user_id: int = Depends(get_current_user_id)
):
    return store.list_owned(db, Expense, user_id)


@router.post("/expenses", response_model=ExpenseOut)
async def create_expense(
    expense: ExpenseCreate,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    fields = expense.model_dump(exclude_none=True)
    fields["type"] = expense.type.value
    return store.create_owned(db, Expense, user_id, **fields)


@router.get("/expenses/{expense_id}", response_model=ExpenseOut)
async def get_expense(
    expense_id: str,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    record_id = parse_record_id(expense_id)
    expense = None
    if record_id is not None:
        expense = store.get_owned(db, Expense, record_id, user_id)
    if not expense:
        raise NotFoundError()
    return expense


@router.put("/expenses/{expense_id}", response_model=ExpenseOut)
async def update_expense(
    expense_id: str,
    expense: ExpenseUpdate,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    record_id = parse_record_id(expense_id)
    if record_id is None:
        raise NotFoundError()

    fields = expense.model_dump(exclude_unset=True, exclude_none=True)
    if expense.type is not None:
        fields["type"] = expense.type.value
    updated = store.update_owned(db, Expense, record_id, user_id, **fields)
    if not updated:
        raise NotFoundError()
    return updated


@router.delete("/expenses/{expense_id}", response_model=Message)
async def delete_expense(
    expense_id: str,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    # deleting a missing or foreign record is acknowledged the same way
    record_id = parse_record_id(expense_id)
    if record_id is not None:
        store.delete_owned(db, Expense, record_id, user_id)
    return Message(message="Deleted")


@router.get("/goals", response_model=GoalOut)
async def get_goal(
    db: Session = Depends(get_db), user_id: int = Depends(get_current_user_id)
):
    goal = store.get_one_owned(db, Goal, user_id)
    return GoalOut(goal=goal.goal if goal else None)


@router.post("/goals", response_model=GoalOut)
async def set_goal(
    body: GoalIn,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    goal = store.upsert_owned(db, Goal, user_id, goal=body.goal)
    return GoalOut(goal=goal.goal)


@router.get("/limits", response_model=LimitOut)
async def get_limit(
    db: Session = Depends(get_db), user_id: int = Depends(get_current_user_id)
):
    limit = store.get_one_owned(db, Limit, user_id)
    return LimitOut(limit=limit.limit if limit else None)


@router.post("/limits", response_model=LimitOut)
async def set_limit(
    body: LimitIn,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    limit = store.upsert_owned(db, Limit, user_id, limit=body.limit)
    return LimitOut(limit=limit.limit)
