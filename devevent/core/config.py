import os

from dotenv import load_dotenv

load_dotenv()

# Database configuration
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./devevent.db")
DB_CONNECT_TIMEOUT = float(os.getenv("DB_CONNECT_TIMEOUT", "5"))
DB_POOL_SIZE = int(os.getenv("DB_POOL_SIZE", "10"))

# Uploadcare configuration
UPLOADCARE_PUBLIC_KEY = os.getenv("UPLOADCARE_PUBLIC_KEY", "")
UPLOADCARE_SUBDOMAIN = os.getenv("UPLOADCARE_SUBDOMAIN", "")
UPLOADCARE_UPLOAD_URL = os.getenv("UPLOADCARE_UPLOAD_URL", "https://upload.uploadcare.com/base/")
UPLOADCARE_TIMEOUT = float(os.getenv("UPLOADCARE_TIMEOUT", "30"))

# CORS / logging
CORS_ORIGINS = os.getenv("CORS_ORIGINS", "*")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")


def get_cors_origins() -> list[str]:
    return [origin.strip() for origin in CORS_ORIGINS.split(",") if origin.strip()]
