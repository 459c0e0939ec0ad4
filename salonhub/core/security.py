from datetime import datetime, timedelta
from typing import Optional
import logging
from jose import JWTError, jwt
from passlib.context import CryptContext
from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session
from salonhub.core.config import Settings, settings
from salonhub.core.database import get_db
from salonhub.models.models import User

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="api/v1/auth/login-email")

ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash"""
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    """Hash a password"""
    return pwd_context.hash(password)


class TokenService:
    """
    Issues and verifies JWTs for a user id.

    Secrets and lifetimes come from the injected ``Settings``; nothing here
    reads the process environment.
    """

    def __init__(self, config: Settings):
        self.config = config

    def _secret_for(self, token_type: str) -> str:
        if token_type == REFRESH_TOKEN_TYPE:
            return self.config.REFRESH_SECRET_KEY
        return self.config.SECRET_KEY

    def _encode(self, claims: dict, token_type: str, expires_delta: timedelta) -> str:
        to_encode = claims.copy()
        to_encode.update({"exp": datetime.utcnow() + expires_delta, "type": token_type})
        return jwt.encode(to_encode, self._secret_for(token_type), algorithm=self.config.ALGORITHM)

    def create_access_token(self, user_id: str, name: Optional[str] = None,
                            expires_delta: Optional[timedelta] = None) -> str:
        """Create a short lived access token"""
        if expires_delta is None:
            expires_delta = timedelta(minutes=self.config.ACCESS_TOKEN_EXPIRE_MINUTES)
        return self._encode({"sub": user_id, "name": name}, ACCESS_TOKEN_TYPE, expires_delta)

    def create_refresh_token(self, user_id: str) -> str:
        """Create a refresh token"""
        return self._encode(
            {"sub": user_id},
            REFRESH_TOKEN_TYPE,
            timedelta(days=self.config.REFRESH_TOKEN_EXPIRE_DAYS),
        )

    def decode(self, token: str, token_type: str = ACCESS_TOKEN_TYPE) -> Optional[str]:
        """Return the user id carried by a valid token of the given type, else None"""
        try:
            payload = jwt.decode(token, self._secret_for(token_type), algorithms=[self.config.ALGORITHM])
        except JWTError as e:
            logger.debug(f"Rejected {token_type} token: {e}")
            return None
        if payload.get("type") != token_type:
            return None
        return payload.get("sub")


def get_token_service() -> TokenService:
    """FastAPI dependency; tests override it to inject other settings"""
    return TokenService(settings)


def authenticate_user(db: Session, email: str, password: str):
    """Authenticate a user by email and password"""
    user = db.query(User).filter(User.email == email).first()
    if not user:
        return False
    if not user.hashed_password:
        return False
    if not verify_password(password, user.hashed_password):
        return False
    return user


async def get_current_user(
    token: str = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
    token_service: TokenService = Depends(get_token_service),
) -> User:
    """Get the current authenticated user from the bearer token"""
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    user_id = token_service.decode(token, ACCESS_TOKEN_TYPE)
    if user_id is None:
        raise credentials_exception

    user = db.query(User).filter(User.id == user_id).first()
    if user is None:
        logger.warning(f"Token subject {user_id} no longer exists")
        raise credentials_exception
    return user
