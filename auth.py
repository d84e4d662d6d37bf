# auth.py
import re

from fastapi import APIRouter, Depends, Request, Response
from passlib.context import CryptContext
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
import structlog

from database import get_db, User
from errors import AuthError, ConflictError, ValidationError
from schemas import UserCreate, UserLogin, Message, Me
from sessions import SessionManager
import store

PASSWORD_RULE = (
    "Password must be at least 6 characters and contain both letters and numbers."
)
INVALID_CREDENTIALS = "Invalid credentials"

logger = structlog.get_logger(__name__)

auth_router = APIRouter()


def build_password_context(rounds: int = 12) -> CryptContext:
    return CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=rounds)


def check_password_policy(password: str):
    if (
        len(password) < 6
        or not re.search(r"[A-Za-z]", password)
        or not re.search(r"[0-9]", password)
    ):
        raise ValidationError(PASSWORD_RULE)


def get_sessions(request: Request) -> SessionManager:
    return request.app.state.sessions


def get_password_context(request: Request) -> CryptContext:
    return request.app.state.pwd_context


def get_session_token(request: Request):
    return request.cookies.get(request.app.state.settings.session_cookie_name)


def get_current_user_id(
    token: str = Depends(get_session_token),
    sessions: SessionManager = Depends(get_sessions),
) -> int:
    user_id = sessions.resolve(token)
    if user_id is None:
        raise AuthError()
    return user_id


def get_current_user(
    user_id: int = Depends(get_current_user_id), db: Session = Depends(get_db)
) -> User:
    user = store.get_user(db, user_id)
    if user is None:
        raise AuthError()
    return user


def start_session(request: Request, response: Response, user_id: int):
    sessions = get_sessions(request)
    settings = request.app.state.settings

    sessions.end(get_session_token(request))
    session = sessions.start(user_id)
    response.set_cookie(
        key=settings.session_cookie_name,
        value=session.token,
        max_age=int(sessions.ttl.total_seconds()),
        httponly=True,
        samesite="lax",
        secure=settings.cookie_secure,
    )


@auth_router.post("/register", response_model=Message)
def register(
    user: UserCreate,
    request: Request,
    response: Response,
    db: Session = Depends(get_db),
    pwd_context: CryptContext = Depends(get_password_context),
):
    check_password_policy(user.password)

    if store.get_user_by_phone(db, user.phone):
        raise ConflictError("Phone number already registered")

    try:
        new_user = store.create_user(
            db,
            phone=user.phone,
            password_hash=pwd_context.hash(user.password),
            name=user.name,
        )
    except IntegrityError:
        db.rollback()
        raise ConflictError("Phone number already registered")

    start_session(request, response, new_user.id)
    logger.info("user_registered", user_id=new_user.id)
    return Message(message="User registered")


@auth_router.post("/login", response_model=Message)
def login(
    user: UserLogin,
    request: Request,
    response: Response,
    db: Session = Depends(get_db),
    pwd_context: CryptContext = Depends(get_password_context),
):
    db_user = store.get_user_by_phone(db, user.phone)
    if db_user is None:
        # keep response time close to a real verify
        pwd_context.dummy_verify()
    if not db_user or not pwd_context.verify(user.password, db_user.password):
        logger.info("login_failed")
        raise AuthError(INVALID_CREDENTIALS)

    start_session(request, response, db_user.id)
    logger.info("login_succeeded", user_id=db_user.id)
    return Message(message="Login successful")


@auth_router.post("/logout", response_model=Message)
async def logout(
    request: Request,
    response: Response,
    token: str = Depends(get_session_token),
    sessions: SessionManager = Depends(get_sessions),
):
    sessions.end(token)
    response.delete_cookie(request.app.state.settings.session_cookie_name)
    logger.info("logged_out")
    return Message(message="Logged out")


@auth_router.get("/me", response_model=Me)
async def me(current_user: User = Depends(get_current_user)):
    return Me(phone=current_user.phone)
