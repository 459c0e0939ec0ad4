import logging
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from salonhub.core.database import commit_or_raise, get_db
from salonhub.core.exceptions import BadRequestError
from salonhub.core.security import (
    REFRESH_TOKEN_TYPE,
    TokenService,
    authenticate_user,
    get_password_hash,
    get_token_service,
)
from salonhub.models.models import User
from salonhub.schemas.schemas import (
    RefreshTokenRequest,
    Token,
    UserLogin,
    UserRegister,
    UsernameAvailability,
    UsernameCheck,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def registration_conflict(db: Session, user_data: UserRegister) -> Optional[str]:
    """Message for the first unique field already taken by another account, if any"""
    if db.query(User.id).filter(User.email == user_data.email).first():
        return "Email already registered"
    if db.query(User.id).filter(User.username == user_data.username).first():
        return "Username already taken"
    if user_data.phone_number and db.query(User.id).filter(User.phone_number == user_data.phone_number).first():
        return "Phone number already registered"
    return None


def issue_tokens(user: User, token_service: TokenService) -> dict:
    return {
        "access_token": token_service.create_access_token(user.id, user.name),
        "refresh_token": token_service.create_refresh_token(user.id),
        "token_type": "bearer",
        "user": user
    }


@router.post("/register-email", response_model=Token, status_code=status.HTTP_201_CREATED)
def register_with_email(
    user_data: UserRegister,
    db: Session = Depends(get_db),
    token_service: TokenService = Depends(get_token_service)
):
    """Create an account with email and password and log it in"""
    conflict = registration_conflict(db, user_data)
    if conflict:
        raise BadRequestError(conflict)

    db_user = User(
        email=user_data.email,
        username=user_data.username,
        name=user_data.name,
        phone_number=user_data.phone_number,
        hashed_password=get_password_hash(user_data.password)
    )
    db.add(db_user)
    try:
        db.flush()
    except IntegrityError:
        # a concurrent registration claimed the same email, username or phone
        db.rollback()
        logger.info(f"Registration for {user_data.email} lost a uniqueness race")
        raise BadRequestError(registration_conflict(db, user_data) or "Account already registered")
    commit_or_raise(db, "register user")
    db.refresh(db_user)

    return issue_tokens(db_user, token_service)


@router.post("/login-email", response_model=Token)
def login_with_email(
    login_data: UserLogin,
    db: Session = Depends(get_db),
    token_service: TokenService = Depends(get_token_service)
):
    """Login with email and password"""
    user = authenticate_user(db, login_data.email, login_data.password)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return issue_tokens(user, token_service)


@router.post("/refresh-token", response_model=Token)
def refresh_token(
    token_data: RefreshTokenRequest,
    db: Session = Depends(get_db),
    token_service: TokenService = Depends(get_token_service)
):
    """Exchange a refresh token for a new token pair"""
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    user_id = token_service.decode(token_data.refresh_token, REFRESH_TOKEN_TYPE)
    if user_id is None:
        raise credentials_exception

    user = db.query(User).filter(User.id == user_id).first()
    if user is None:
        raise credentials_exception

    return issue_tokens(user, token_service)


@router.post("/check-username", response_model=UsernameAvailability)
def check_username_availability(
    payload: UsernameCheck,
    db: Session = Depends(get_db)
):
    """Tell whether a username is still free"""
    taken = db.query(User.id).filter(User.username == payload.username).first() is not None
    return {"username": payload.username, "available": not taken}
