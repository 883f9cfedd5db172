from prometheus_client import Counter

SESSIONS_CREATED_TOTAL = Counter(
    "combat_sessions_created_total",
    "Number of training sessions created",
)

VIDEO_UPLOADS_TOTAL = Counter(
    "combat_video_uploads_total",
    "Number of session videos uploaded",
)

TAGS_CREATED_TOTAL = Counter(
    "combat_tags_created_total",
    "Number of tags created",
    ["scope"],
)

SESSION_TAGS_CREATED_TOTAL = Counter(
    "combat_session_tags_created_total",
    "Number of tags applied to session timestamps",
)

USERS_REGISTERED_TOTAL = Counter(
    "combat_users_registered_total",
    "Number of registered users",
)
