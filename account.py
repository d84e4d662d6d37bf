# account.py
from fastapi import APIRouter, Depends
from passlib.context import CryptContext
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
import structlog

from auth import check_password_policy, get_current_user_id, get_password_context
from database import get_db
from errors import ConflictError, NotFoundError
from schemas import ProfileOut, ProfileUpdate
import store

logger = structlog.get_logger(__name__)

profile_router = APIRouter()


@profile_router.get("/profile", response_model=ProfileOut)
async def get_profile(
    db: Session = Depends(get_db), user_id: int = Depends(get_current_user_id)
):
    user = store.get_user(db, user_id)
    if user is None:
        raise NotFoundError("User not found")
    return ProfileOut(name=user.name or "", phone=user.phone)


@profile_router.put("/profile", response_model=ProfileOut)
def update_profile(
    body: ProfileUpdate,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
    pwd_context: CryptContext = Depends(get_password_context),
):
    if body.password:
        check_password_policy(body.password)

    holder = store.get_user_by_phone(db, body.phone)
    if holder is not None and holder.id != user_id:
        raise ConflictError("Phone number already registered")

    update = {"name": body.name, "phone": body.phone}
    if body.password:
        update["password"] = pwd_context.hash(body.password)

    try:
        user = store.update_user(db, user_id, **update)
    except IntegrityError:
        db.rollback()
        raise ConflictError("Phone number already registered")
    if user is None:
        raise NotFoundError("User not found")

    logger.info(
        "profile_updated", user_id=user_id, password_changed="password" in update
    )
    return ProfileOut(name=user.name or "", phone=user.phone)
