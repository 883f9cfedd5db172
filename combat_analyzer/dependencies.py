from fastapi import Depends, Header
from sentry_sdk import set_tag, set_user
from sqlalchemy.orm import Session

from .database import get_db
from .exceptions import AthleteProfileNotFoundException, UnauthorizedException
from .models import Athlete, User
from .security import InvalidTokenError, decode_access_token


def get_current_user_id(authorization: str | None = Header(default=None)) -> int:
    """Resolve the bearer token in the Authorization header to a user id."""
    if not authorization or not authorization.lower().startswith("bearer "):
        raise UnauthorizedException("Missing or invalid Authorization header")
    token = authorization.split(" ", 1)[1].strip()
    if not token:
        raise UnauthorizedException("Missing or invalid Authorization header")
    try:
        user_id = decode_access_token(token)
    except InvalidTokenError:
        raise UnauthorizedException("Invalid or expired token")
    set_user({"id": str(user_id)})
    set_tag("service", "combat-analyzer")
    return user_id


def get_current_user(user_id: int = Depends(get_current_user_id), db: Session = Depends(get_db)) -> User:
    user = db.get(User, user_id)
    if user is None:
        raise UnauthorizedException("User not found")
    return user


def get_current_athlete(user: User = Depends(get_current_user)) -> Athlete:
    if user.athlete is None:
        raise AthleteProfileNotFoundException()
    return user.athlete
