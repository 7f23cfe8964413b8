from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite+aiosqlite:///./proccms.db"

    # If DEV and you hit SSL cert issues with a managed Postgres, set DB_SSL_VERIFY=false in .env
    DB_SSL_VERIFY: bool = True

    SECRET_KEY: str = "change-me"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 12

    ENV: str = "dev"  # "dev" or "prod"
    CORS_ORIGINS: list[str] = ["http://localhost:5173", "http://localhost:3000"]

    # --- SEED ADMIN (created on startup when missing) ---
    SEED_ADMIN_USERNAME: str | None = None
    SEED_ADMIN_PASSWORD: str | None = None
    SEED_ADMIN_NAME: str = "Project Office Admin"
    SEED_ADMIN_PHONE: str = ""
    SEED_ADMIN_DEPARTMENT: str = "OFFICE"
    SEED_ADMIN_EMAIL: str = ""

    # --- EMAIL SETTINGS ---
    SMTP_HOST: str | None = None
    SMTP_PORT: int = 587
    SMTP_USER: str | None = None
    SMTP_PASSWORD: str | None = None
    EMAILS_FROM_EMAIL: str = "no-reply@proccms.local"
    EMAILS_FROM_NAME: str = "PROCCMS"
    # Project office mailbox that receives new-request / completion / verification mails
    PROJECT_OFFICE_EMAIL: str | None = None

    # --- UPLOADS ---
    UPLOAD_DIR: str = "uploads"
    MAX_UPLOAD_SIZE: int = 5 * 1024 * 1024

    # --- RATE LIMITING ---
    RATE_LIMIT_ENABLED: bool = True
    LOGIN_RATE_LIMIT: str = "10/minute"
    REDIS_URL: str | None = None

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"

settings = Settings()
