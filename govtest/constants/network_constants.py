"""Network configuration constants for the trainer web server."""

DEFAULT_HOST: str = "127.0.0.1"
DEFAULT_PORT: int = 8000
WORKSPACE_COOKIE: str = "govtest_workspace"
WORKSPACE_COOKIE_MAX_AGE_SECONDS: int = 60 * 60 * 12
DEFAULT_WORKSPACE_TIMEOUT_MINUTES: int = 120
