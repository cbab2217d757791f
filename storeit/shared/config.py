# storeit/shared/config.py
from pydantic import BaseModel
import os

class Settings(BaseModel):
    ENV: str = os.getenv("ENV", "dev")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # "local" (bundled dev backend) or "appwrite"
    BACKEND: str = os.getenv("STOREIT_BACKEND", "local")

    # Backend-as-a-service coordinates
    APPWRITE_ENDPOINT: str = os.getenv("APPWRITE_ENDPOINT", "http://localhost:8000")
    APPWRITE_PROJECT: str = os.getenv("APPWRITE_PROJECT", "storeit")
    APPWRITE_DATABASE: str = os.getenv("APPWRITE_DATABASE", "storeit")
    APPWRITE_USERS_COLLECTION: str = os.getenv("APPWRITE_USERS_COLLECTION", "users")
    APPWRITE_FILES_COLLECTION: str = os.getenv("APPWRITE_FILES_COLLECTION", "files")
    APPWRITE_BUCKET: str = os.getenv("APPWRITE_BUCKET", "storeit")
    APPWRITE_SECRET: str | None = os.getenv("APPWRITE_SECRET")

    # Local backend
    STORAGE_DIR: str = os.getenv("STORAGE_DIR", "storage")
    LOCAL_DB_URL: str | None = os.getenv("LOCAL_DB_URL")
    OTP_TTL_MIN: int = int(os.getenv("OTP_TTL_MIN", "15"))
    JWT_KEY: str = os.getenv("JWT_KEY", "dev-secret")
    JWT_ALG: str = os.getenv("JWT_ALG", "HS256")
    SESSION_EXPIRE_MIN: int = int(os.getenv("SESSION_EXPIRE_MIN", str(60 * 24 * 365)))

    # Session cookie
    SESSION_COOKIE: str = os.getenv("SESSION_COOKIE", "appwrite-session")
    COOKIE_SECURE: bool = os.getenv("COOKIE_SECURE", "true").lower() == "true"
    LOGIN_PATH: str = os.getenv("LOGIN_PATH", "/sign-in")

    # Files
    MAX_FILE_SIZE: int = int(os.getenv("MAX_FILE_SIZE", str(50 * 1024 * 1024)))
    TOTAL_QUOTA: int = int(os.getenv("TOTAL_QUOTA", str(2 * 1024 * 1024 * 1024)))
    AVATAR_PLACEHOLDER_URL: str = os.getenv(
        "AVATAR_PLACEHOLDER_URL",
        "https://img.freepik.com/free-psd/3d-illustration-person-with-sunglasses_23-2149436188.jpg",
    )

settings = Settings()
