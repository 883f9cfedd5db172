import structlog
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..config import get_settings
from ..exceptions import ConflictException, DomainValidationException, UnauthorizedException
from ..metrics import USERS_REGISTERED_TOTAL
from ..models import Athlete, User
from ..schemas.athlete import AthleteResponse
from ..schemas.auth import AuthResponse, LoginRequest, MeResponse, RegisterRequest, UserResponse
from ..security import create_access_token, get_password_hash, verify_password

logger = structlog.get_logger(__name__)


def normalize_email(email: str) -> str:
    return email.strip().lower()


def build_me_response(user: User) -> MeResponse:
    return MeResponse(
        user=UserResponse.model_validate(user),
        athlete=AthleteResponse.model_validate(user.athlete) if user.athlete is not None else None,
    )


class AuthService:
    def __init__(self, db: Session):
        self.db = db

    def _auth_response(self, user: User) -> AuthResponse:
        me = build_me_response(user)
        return AuthResponse(token=create_access_token(user.id), user=me.user, athlete=me.athlete)

    def _email_taken(self, email: str) -> bool:
        return self.db.scalar(select(User.id).where(User.email == email).limit(1)) is not None

    def register(self, payload: RegisterRequest) -> AuthResponse:
        settings = get_settings()
        if len(payload.password) < settings.min_password_length:
            raise DomainValidationException(
                f"Password must be at least {settings.min_password_length} characters long"
            )

        email = normalize_email(payload.email)
        if self._email_taken(email):
            logger.info("register_duplicate_email")
            raise ConflictException("Email is already registered")

        user = User(email=email, password_hash=get_password_hash(payload.password))
        user.athlete = Athlete(name=payload.name)
        self.db.add(user)
        try:
            self.db.commit()
        except IntegrityError as exc:
            self.db.rollback()
            logger.warning("register_duplicate_email", error=str(exc.orig))
            raise ConflictException("Email is already registered") from exc
        self.db.refresh(user)

        USERS_REGISTERED_TOTAL.inc()
        logger.info("user_registered", user_id=user.id, athlete_id=user.athlete.id)
        return self._auth_response(user)

    def login(self, payload: LoginRequest) -> AuthResponse:
        email = normalize_email(payload.email)
        user = self.db.scalar(select(User).where(User.email == email))
        if user is None or not verify_password(payload.password, user.password_hash):
            logger.info("login_failed")
            raise UnauthorizedException("Invalid email or password")
        logger.info("login_succeeded", user_id=user.id)
        return self._auth_response(user)
