from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from tubely.auth import hash_password
from tubely.errors import BadRequest
from tubely.models.user import User


def get_user_by_email(db: Session, email: str) -> User | None:
    email = email.strip().lower()
    return db.query(User).filter(func.lower(User.email) == email).first()


def create_user(db: Session, email: str, password: str) -> User:
    """Create a user with an argon2-hashed password. Raises BadRequest if the email is taken."""
    user = User(email=email.strip().lower(), password=hash_password(password))
    db.add(user)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise BadRequest("Email already registered", detail=str(e)) from e
    db.refresh(user)
    return user
