import logging
import sys
import os
from pythonjsonlogger import jsonlogger

from app.config import get_settings

settings = get_settings()
PROJECT_NAME = settings.PROJECT_NAME
ENVIRONMENT = settings.ENVIRONMENT

# Determine log level from environment or config
log_level_str = os.getenv("LOG_LEVEL", "DEBUG" if ENVIRONMENT == "development" else "INFO").upper()
valid_log_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
if log_level_str not in valid_log_levels:
    print(f"[Logging Config] Warning: Invalid LOG_LEVEL '{log_level_str}'. Defaulting to INFO.")
    log_level_str = "INFO"
log_level = logging.getLevelName(log_level_str)

# Configure the root logger so library loggers share the same handler
logger = logging.getLogger()
logger.setLevel(log_level)

# Prevent adding handlers multiple times (e.g., during reloads)
if logger.hasHandlers():
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)

USE_JSON_LOGGING = os.getenv("USE_JSON_LOGGING", "true").lower() == "true"

log_handler = logging.StreamHandler(sys.stdout)

if USE_JSON_LOGGING:
    formatter = jsonlogger.JsonFormatter(
        fmt='%(asctime)s %(levelname)s [%(name)s] [%(filename)s:%(lineno)d] %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S',
        rename_fields={'levelname': 'level'},
    )
else:
    formatter = logging.Formatter(
        "%(asctime)s - [%(levelname)s] - %(name)s - (%(filename)s:%(lineno)d) - %(message)s"
    )

log_handler.setFormatter(formatter)
logger.addHandler(log_handler)

# --- Set Log Levels for Third-Party Libraries ---
third_party_log_level_str = os.getenv("THIRD_PARTY_LOG_LEVEL", "WARNING" if ENVIRONMENT != "development" else "INFO").upper()
if third_party_log_level_str not in valid_log_levels: third_party_log_level_str = "WARNING"
third_party_log_level = logging.getLevelName(third_party_log_level_str)

logging.getLogger("uvicorn").setLevel(third_party_log_level)
logging.getLogger("uvicorn.error").setLevel(logging.INFO) # Keep uvicorn errors visible
logging.getLogger("uvicorn.access").setLevel(third_party_log_level)
logging.getLogger("sqlalchemy").setLevel(third_party_log_level)
logging.getLogger("alembic").setLevel(logging.INFO)
logging.getLogger("httpx").setLevel(third_party_log_level)
logging.getLogger("httpcore").setLevel(third_party_log_level)
# boto is very chatty at DEBUG (signing, retries, endpoint resolution)
logging.getLogger("boto3").setLevel(third_party_log_level)
logging.getLogger("botocore").setLevel(third_party_log_level)
logging.getLogger("s3transfer").setLevel(third_party_log_level)
logging.getLogger("multipart").setLevel(logging.WARNING)

logger.debug(f"Logging initialized for '{PROJECT_NAME}'. Level: {log_level_str}. Env: {ENVIRONMENT}. JSON: {USE_JSON_LOGGING}")
