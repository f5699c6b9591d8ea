import os
import threading

class BackendSettings:
    _instance = None
    _lock = threading.Lock()

    def __init__(self):
        self.DEBUG_MODE = os.environ.get("DEBUG_MODE","development")

        # Security: Force disable debug info in API responses (overrides DEBUG_MODE)
        # Set DISABLE_API_DEBUG_INFO=true to hide sensitive information even in development
        self.DISABLE_API_DEBUG_INFO = os.environ.get("DISABLE_API_DEBUG_INFO", "false").lower() in ["true", "1", "yes", "on"]

        # Database, falls back to the POSTGRES_* variables when unset
        self.DATABASE_URL = os.environ.get("DATABASE_URL", None)

        # Id of the site course; requests without courseid are site scoped
        self.SITE_ID = int(os.environ.get("SITE_ID", "1"))

        # Authentication is done by the fronting proxy, which passes the username in this header
        self.AUTH_USER_HEADER = os.environ.get("AUTH_USER_HEADER", "X-Remote-User")

        # Resource library display
        self.DATE_DISPLAY_FORMAT = os.environ.get("DATE_DISPLAY_FORMAT", "%A, %d %B %Y, %I:%M %p")
        self.RESOURCELIBRARY_MAX_RESULTS = int(os.environ.get("RESOURCELIBRARY_MAX_RESULTS", "200"))
        self.RATE_LIMIT = os.environ.get("RATE_LIMIT", "120/minute")

    def __new__(cls):
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = super(BackendSettings, cls).__new__(cls)
        return cls._instance

settings = BackendSettings()
