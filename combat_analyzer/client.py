"""
Async HTTP client for the combat analyzer API.

The client never holds a token itself: ``login`` and ``register`` return an
``AuthSession`` that callers pass to every authenticated call, and
``SessionStore`` persists it between runs.

Usage:
    store = SessionStore(Path("~/.combat-analyzer/session.json").expanduser())
    async with CombatAnalyzerClient("http://localhost:8000") as client:
        session = store.load() or await client.login(email, password)
        store.save(session)
        stats = await client.get_my_stats(session)
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import httpx
import structlog
from pydantic import TypeAdapter, ValidationError

from .models import TagCategory, TagOutcome
from .schemas.auth import AuthResponse, MeResponse
from .schemas.dashboard import AthleteDashboardResponse
from .schemas.session import SessionResponse, SessionTagResponse, SessionWithTagsResponse
from .schemas.stats import AthleteStatsResponse
from .schemas.tag import TagResponse
from .services.stats_service import AthleteStats, compute_athlete_stats

logger = structlog.get_logger(__name__)

_sessions_adapter = TypeAdapter(list[SessionWithTagsResponse])
_tags_adapter = TypeAdapter(list[TagResponse])


class ApiError(Exception):
    def __init__(self, status_code: int, detail: Any = None):
        super().__init__(f"API error {status_code}: {detail}")
        self.status_code = status_code
        self.detail = detail


class AuthSession(AuthResponse):
    """Token plus the user and athlete it was issued for."""

    def auth_headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.token}"}


class SessionStore:
    """File-backed persistence of the current ``AuthSession``."""

    def __init__(self, path: Path | str):
        self.path = Path(path)

    def load(self) -> AuthSession | None:
        if not self.path.exists():
            return None
        try:
            return AuthSession.model_validate_json(self.path.read_text(encoding="utf-8"))
        except ValidationError:
            logger.warning("auth_session_unreadable", path=str(self.path))
            return None

    def save(self, session: AuthSession) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(session.model_dump_json(by_alias=True), encoding="utf-8")

    def clear(self) -> None:
        self.path.unlink(missing_ok=True)


class CombatAnalyzerClient:
    def __init__(
        self,
        base_url: str,
        *,
        timeout: float | httpx.Timeout = 20.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = httpx.Timeout(timeout) if isinstance(timeout, int | float) else timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> CombatAnalyzerClient:
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            timeout=self._timeout,
            transport=self._transport,
        )
        return self

    async def __aexit__(self, *args: Any) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    async def _request(
        self,
        method: str,
        path: str,
        *,
        session: AuthSession | None = None,
        **kwargs: Any,
    ) -> Any:
        assert self._client is not None, "Client not initialized"
        headers = session.auth_headers() if session is not None else None
        try:
            response = await self._client.request(method, f"/api{path}", headers=headers, **kwargs)
        except httpx.HTTPError as exc:
            logger.error("http_request_failed", method=method, path=path, error=str(exc))
            raise

        if response.is_error:
            try:
                detail = response.json().get("detail")
            except ValueError:
                detail = response.text[:500] if response.text else None
            logger.info("api_error", method=method, path=path, status_code=response.status_code, detail=detail)
            raise ApiError(response.status_code, detail)

        if response.status_code == httpx.codes.NO_CONTENT or not response.content:
            return None
        return response.json()

    # auth

    async def register(self, email: str, password: str, name: str) -> AuthSession:
        data = await self._request("POST", "/auth/register", json={"email": email, "password": password, "name": name})
        return AuthSession.model_validate(data)

    async def login(self, email: str, password: str) -> AuthSession:
        data = await self._request("POST", "/auth/login", json={"email": email, "password": password})
        return AuthSession.model_validate(data)

    async def me(self, session: AuthSession) -> MeResponse:
        return MeResponse.model_validate(await self._request("GET", "/me", session=session))

    # dashboard and stats

    async def get_my_dashboard(self, session: AuthSession) -> AthleteDashboardResponse:
        return AthleteDashboardResponse.model_validate(await self._request("GET", "/my/dashboard", session=session))

    async def get_my_stats(self, session: AuthSession) -> AthleteStats:
        """Fetch sessions with their tags and compute statistics locally."""
        sessions = await self.list_my_sessions(session, include_tags=True)
        return compute_athlete_stats(sessions)

    async def fetch_my_stats(self, session: AuthSession) -> AthleteStatsResponse:
        return AthleteStatsResponse.model_validate(await self._request("GET", "/my/stats", session=session))

    # sessions

    async def list_my_sessions(
        self,
        session: AuthSession,
        *,
        include_tags: bool = False,
        search: str | None = None,
    ) -> list[SessionWithTagsResponse]:
        params: dict[str, Any] = {"includeTags": str(include_tags).lower()}
        if search:
            params["search"] = search
        return _sessions_adapter.validate_python(await self._request("GET", "/my/sessions", session=session, params=params))

    async def create_my_session(self, session: AuthSession, video_url: str, notes: str | None = None) -> SessionResponse:
        data = await self._request("POST", "/my/sessions", session=session, json={"videoUrl": video_url, "notes": notes})
        return SessionResponse.model_validate(data)

    async def upload_my_session(
        self,
        session: AuthSession,
        filename: str,
        content: bytes,
        *,
        notes: str | None = None,
        content_type: str = "video/mp4",
    ) -> SessionResponse:
        data = await self._request(
            "POST",
            "/my/sessions/upload",
            session=session,
            files={"video": (filename, content, content_type)},
            data={"notes": notes} if notes else None,
        )
        return SessionResponse.model_validate(data)

    async def get_my_session(self, session: AuthSession, session_id: int) -> SessionWithTagsResponse:
        return SessionWithTagsResponse.model_validate(
            await self._request("GET", f"/my/sessions/{session_id}", session=session)
        )

    async def delete_my_session(self, session: AuthSession, session_id: int) -> None:
        await self._request("DELETE", f"/my/sessions/{session_id}", session=session)

    async def add_my_session_tag(
        self,
        session: AuthSession,
        session_id: int,
        tag_id: int,
        *,
        timestamp_sec: int | None = None,
        note: str | None = None,
    ) -> SessionTagResponse:
        payload = {"tagId": tag_id, "timestampSec": timestamp_sec, "note": note}
        data = await self._request("POST", f"/my/sessions/{session_id}/tags", session=session, json=payload)
        return SessionTagResponse.model_validate(data)

    async def delete_my_session_tag(self, session: AuthSession, session_id: int, session_tag_id: int) -> None:
        await self._request("DELETE", f"/my/sessions/{session_id}/tags/{session_tag_id}", session=session)

    # tags

    async def list_my_tags(self, session: AuthSession) -> list[TagResponse]:
        return _tags_adapter.validate_python(await self._request("GET", "/my/tags", session=session))

    async def create_my_tag(
        self,
        session: AuthSession,
        name: str,
        category: TagCategory,
        *,
        outcome: TagOutcome | None = None,
        description: str | None = None,
    ) -> TagResponse:
        payload = {
            "name": name,
            "description": description,
            "category": TagCategory(category).value,
            "outcome": TagOutcome(outcome).value if outcome is not None else None,
        }
        return TagResponse.model_validate(await self._request("POST", "/my/tags", session=session, json=payload))

    async def update_my_tag(self, session: AuthSession, tag_id: int, **changes: Any) -> TagResponse:
        """PATCH a tag; keyword names are camelCase field names (``name``, ``category``, ``outcome`` ...)."""
        payload = {key: getattr(value, "value", value) for key, value in changes.items()}
        return TagResponse.model_validate(await self._request("PATCH", f"/my/tags/{tag_id}", session=session, json=payload))

    async def delete_my_tag(self, session: AuthSession, tag_id: int) -> None:
        await self._request("DELETE", f"/my/tags/{tag_id}", session=session)

    async def get_tag_usage(self, session: AuthSession, tag_id: int) -> int:
        data = await self._request("GET", f"/my/tags/{tag_id}/usage", session=session)
        return data["usageCount"]
