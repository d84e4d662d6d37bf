# database.py
from sqlalchemy import (
    create_engine,
    text,
    Column,
    Integer,
    String,
    Float,
    Date,
    ForeignKey,
)
from sqlalchemy.orm import sessionmaker, declarative_base
from datetime import date

SessionLocal = sessionmaker(autocommit=False, autoflush=False)
Base = declarative_base()


class User(Base):
    __tablename__ = "users"
    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    name = Column(String, nullable=False, default="")
    phone = Column(String, unique=True, index=True, nullable=False)
    password = Column(String, nullable=False)


class Expense(Base):
    __tablename__ = "expenses"
    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"), index=True, nullable=False)
    amount = Column(Float, nullable=False)
    category = Column(String, nullable=False, default="")
    description = Column(String, nullable=False, default="")
    type = Column(String, nullable=False, default="expense")
    date = Column(Date, nullable=False, default=date.today)


class Goal(Base):
    __tablename__ = "goals"
    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"), unique=True, nullable=False)
    goal = Column(Float)


class Limit(Base):
    __tablename__ = "limits"
    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"), unique=True, nullable=False)
    limit = Column(Float)


def init_db(database_url: str):
    """Bind the session factory to ``database_url`` and create missing tables.

    Raises ``sqlalchemy.exc.OperationalError`` when the database cannot be
    reached.
    """
    connect_args = {}
    if database_url.startswith("sqlite"):
        connect_args["check_same_thread"] = False
    engine = create_engine(database_url, connect_args=connect_args)

    with engine.connect() as conn:
        conn.execute(text("SELECT 1"))

    Base.metadata.create_all(bind=engine)
    SessionLocal.configure(bind=engine)
    return engine


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
