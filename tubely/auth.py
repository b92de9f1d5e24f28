from datetime import datetime, timedelta
from jose import JWTError, jwt
from passlib.context import CryptContext
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from pydantic import ValidationError
from tubely.config import Settings, get_settings
from tubely.errors import Unauthenticated
from tubely.schemas.user import TokenPayload

TOKEN_ISSUER = "tubely-access"

security = HTTPBearer(auto_error=False)

# Use Argon2 for password hashing
pwd_context = CryptContext(
    schemes=["argon2"],
    deprecated="auto",
)


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain: str, hashed: str | None) -> bool:
    if not hashed:
        return False
    return pwd_context.verify(plain, hashed)


def create_access_token(user_id: str, settings: Settings) -> str:
    expire = datetime.utcnow() + timedelta(
        minutes=settings.access_token_expire_minutes
    )
    payload = {
        "sub": user_id,
        "iss": TOKEN_ISSUER,
        "iat": datetime.utcnow(),
        "exp": expire,
    }
    return jwt.encode(payload, settings.secret_key, algorithm=settings.algorithm)


def decode_token(token: str, settings: Settings) -> TokenPayload | None:
    try:
        payload = jwt.decode(
            token,
            settings.secret_key,
            algorithms=[settings.algorithm],
            issuer=TOKEN_ISSUER,
        )
        return TokenPayload(
            sub=payload["sub"],
            exp=payload["exp"],
            iss=payload["iss"],
        )
    except (JWTError, KeyError, ValidationError):
        return None


def verify_token(token: str, settings: Settings) -> str:
    """Return the caller's user id for a bearer token. Raises Unauthenticated."""
    payload = decode_token(token, settings)
    if not payload:
        raise Unauthenticated("Couldn't validate JWT")
    return payload.sub


def get_current_user_id(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    settings: Settings = Depends(get_settings),
) -> str:
    if not credentials:
        raise Unauthenticated("Couldn't find JWT")
    return verify_token(credentials.credentials, settings)
