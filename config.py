import os
from dotenv import load_dotenv

load_dotenv()


class Config:
    # ------------------------
    # MongoDB
    # ------------------------
    MONGODB_URI = os.getenv("MONGODB_URI", "mongodb://localhost:27017")
    DB_NAME = os.getenv("DB_NAME", "KTV-Family")
    MONGO_MAX_POOL_SIZE = int(os.getenv("MONGO_MAX_POOL_SIZE", "10"))
    MONGO_MIN_POOL_SIZE = int(os.getenv("MONGO_MIN_POOL_SIZE", "5"))
    MONGO_MAX_IDLE_TIME_MS = int(os.getenv("MONGO_MAX_IDLE_TIME_MS", "60000"))
    MONGO_SERVER_SELECTION_TIMEOUT_MS = int(os.getenv("MONGO_SERVER_SELECTION_TIMEOUT_MS", "5000"))

    # ------------------------
    # API
    # ------------------------
    APP_NAME = os.getenv("APP_NAME", "KTV Admin API")
    CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]

    # ------------------------
    # Logging
    # ------------------------
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
