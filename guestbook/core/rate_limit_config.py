# Per-endpoint rate limits kept in one table
from fastapi_limiter.depends import RateLimiter
from guestbook.core.config import settings

# path: limit
API_RATE_LIMITS = {
    # entries (public writes are the spam surface)
    "/entries": {"times": 10, "seconds": 60},
    "/entries:list": {"times": 120, "seconds": 60},
    "/entries/{entry_id}/like": {"times": 30, "seconds": 60},
    "/entries/{entry_id}/approve": {"times": 60, "seconds": 60},
    "/entries/{entry_id}:delete": {"times": 60, "seconds": 60},

    # auth
    "/auth/signup": {"times": 5, "seconds": 60},
    "/auth/login": {"times": 10, "seconds": 60},

    # profile / domain
    "/profile": {"times": 30, "seconds": 60},
    "/domain": {"times": 10, "seconds": 60},
}

def get_rate_limiter(path: str):
    conf = API_RATE_LIMITS.get(path)
    if not settings.RATE_LIMIT_ENABLED or not conf:
        # FastAPI still needs a callable dependency
        async def _noop_dep():
            return None
        return _noop_dep
    return RateLimiter(times=conf["times"], seconds=conf["seconds"])
