from .athlete import (
    AthleteCreate,
    AthleteDetailResponse,
    AthleteResponse,
    AthleteUpdate,
)
from .auth import AuthResponse, LoginRequest, MeResponse, RegisterRequest, UserResponse
from .dashboard import (
    AthleteDashboardResponse,
    DashboardSession,
    DashboardSummary,
    SessionStatsResponse,
    TagCount,
    TagStatsResponse,
)
from .session import (
    SessionCreate,
    SessionResponse,
    SessionTagCreate,
    SessionTagResponse,
    SessionWithTagsResponse,
)
from .stats import AthleteStatsResponse, OutcomeRate, StrengthCount, TrendPoint
from .tag import (
    OutcomeTagCreate,
    PlainTagCreate,
    TagClassification,
    TagCreate,
    TagResponse,
    TagUpdate,
    TagUsageResponse,
    classify_tag,
)
