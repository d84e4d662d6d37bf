# store.py
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from database import User


# users


def create_user(db: Session, phone: str, password_hash: str, name: str = "") -> User:
    user = User(name=name or "", phone=phone, password=password_hash)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def get_user(db: Session, user_id: int) -> Optional[User]:
    return db.query(User).filter(User.id == user_id).first()


def get_user_by_phone(db: Session, phone: str) -> Optional[User]:
    return db.query(User).filter(User.phone == phone).first()


def update_user(db: Session, user_id: int, **fields) -> Optional[User]:
    user = get_user(db, user_id)
    if user is None:
        return None
    for key, value in fields.items():
        setattr(user, key, value)
    db.commit()
    db.refresh(user)
    return user


# owner-scoped records (Expense, Goal, Limit)


def create_owned(db: Session, model, user_id: int, **fields):
    record = model(user_id=user_id, **fields)
    db.add(record)
    db.commit()
    db.refresh(record)
    return record


def list_owned(db: Session, model, user_id: int):
    return db.query(model).filter(model.user_id == user_id).order_by(model.id).all()


def get_owned(db: Session, model, record_id: int, user_id: int):
    return (
        db.query(model)
        .filter(model.id == record_id, model.user_id == user_id)
        .first()
    )


def get_one_owned(db: Session, model, user_id: int):
    return db.query(model).filter(model.user_id == user_id).first()


def update_owned(db: Session, model, record_id: int, user_id: int, **fields):
    record = get_owned(db, model, record_id, user_id)
    if record is None:
        return None
    for key, value in fields.items():
        setattr(record, key, value)
    db.commit()
    db.refresh(record)
    return record


def upsert_owned(db: Session, model, user_id: int, **fields):
    """Update the caller's single ``model`` row, inserting it when missing.

    ``model.user_id`` is unique, so a concurrent first insert surfaces as an
    IntegrityError; the losing writer then updates the row the winner created.
    """
    record = get_one_owned(db, model, user_id)
    if record is None:
        record = model(user_id=user_id, **fields)
        db.add(record)
    else:
        for key, value in fields.items():
            setattr(record, key, value)

    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        record = db.query(model).filter(model.user_id == user_id).one()
        for key, value in fields.items():
            setattr(record, key, value)
        db.commit()

    db.refresh(record)
    return record


def delete_owned(db: Session, model, record_id: int, user_id: int) -> bool:
    deleted = (
        db.query(model)
        .filter(model.id == record_id, model.user_id == user_id)
        .delete(synchronize_session=False)
    )
    db.commit()
    return deleted > 0
