import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "hris_db"),
}

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))

HISTORY_DAYS = int(os.getenv("HISTORY_DAYS", "10"))
REPORT_LOG_LIMIT = int(os.getenv("REPORT_LOG_LIMIT", "1000"))
ENABLE_MIDNIGHT_ROLLOVER = bool(int(os.getenv("ENABLE_MIDNIGHT_ROLLOVER", "1")))
