from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from tubely.auth import create_access_token, verify_password
from tubely.config import Settings, get_settings
from tubely.database import get_db
from tubely.errors import BadRequest, Unauthenticated
from tubely.repositories.user_repository import create_user, get_user_by_email
from tubely.schemas.user import UserCreate, UserResponse, LoginRequest, TokenResponse

router = APIRouter(prefix="/api", tags=["auth"])

MIN_PASSWORD_LENGTH = 6


@router.post("/users", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def register(body: UserCreate, db: Session = Depends(get_db)):
    """Create an account with email and password."""
    if "@" not in body.email:
        raise BadRequest("Invalid email")
    if len(body.password) < MIN_PASSWORD_LENGTH:
        raise BadRequest(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
    user = create_user(db, body.email, body.password)
    return UserResponse.model_validate(user)


@router.post("/login", response_model=TokenResponse)
def login(
    body: LoginRequest,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    """Login with email and password."""
    user = get_user_by_email(db, body.email)
    if not user or not verify_password(body.password, user.password):
        raise Unauthenticated("Incorrect email or password")
    return TokenResponse(access_token=create_access_token(user.id, settings))
