from fastapi import HTTPException, status


class NotFoundException(HTTPException):
    def __init__(self, detail: str = "Not found"):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class AthleteNotFoundException(NotFoundException):
    def __init__(self, athlete_id: int | None = None):
        super().__init__(detail="Athlete not found")
        self.athlete_id = athlete_id


class AthleteProfileNotFoundException(NotFoundException):
    def __init__(self):
        super().__init__(detail="Athlete profile not found for this user")


class SessionNotFoundException(NotFoundException):
    def __init__(self, session_id: int):
        super().__init__(detail="Session not found")
        self.session_id = session_id


class TagNotFoundException(NotFoundException):
    def __init__(self, tag_id: int):
        super().__init__(detail="Tag not found")
        self.tag_id = tag_id


class SessionTagNotFoundException(NotFoundException):
    def __init__(self, session_tag_id: int):
        super().__init__(detail="SessionTag not found")
        self.session_tag_id = session_tag_id


class ConflictException(HTTPException):
    def __init__(self, detail: str):
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)


class DomainValidationException(HTTPException):
    def __init__(self, detail: str):
        super().__init__(status_code=422, detail=detail)


class UnauthorizedException(HTTPException):
    def __init__(self, detail: str = "Not authenticated"):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"},
        )


class ForbiddenException(HTTPException):
    def __init__(self, detail: str = "Forbidden"):
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)
