# Standard library imports
import logging

# Third-party imports
from fastapi import FastAPI, Request
from starlette.middleware.sessions import SessionMiddleware

# Local imports
from config import get_settings
from auth.middleware import AuthMiddleware
from ui_routes import router as ui_router

# Get settings
settings = get_settings()

# Set up logging
logging.basicConfig(
    level=settings.LOG_LEVEL,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Solotter")

# Middleware added last runs first: sessions must be loaded before
# AuthMiddleware reads them.
app.add_middleware(
    AuthMiddleware,
    public_paths=[
        "/",
        "/auth/login",
        "/auth/callback",
        "/auth/logout",
        "/docs",
        "/redoc",
        "/openapi.json"
    ],
    protected_paths=[
        "/api/*"
    ]
)

app.add_middleware(
    SessionMiddleware,
    secret_key=settings.SECRET_KEY,
    session_cookie=settings.SESSION_COOKIE_NAME,
    max_age=settings.SESSION_EXPIRY_HOURS * 3600,
    same_site=settings.SESSION_SAME_SITE,
    https_only=settings.SESSION_HTTPS_ONLY
)

# Register routers
app.include_router(ui_router)

# Root route
@app.get("/")
async def root(request: Request):
    """Describe the signed-in user, if any."""
    twitter_auth = getattr(request.state, "twitter_auth", None)
    return {
        "auth": {"screenName": twitter_auth["screen_name"]} if twitter_auth else None
    }

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        app,
        host=settings.HOST,
        port=settings.PORT,
        log_level=settings.LOG_LEVEL.lower()
    )
