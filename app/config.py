import os
import logging
from dotenv import load_dotenv

# Load environment variables only for local development
if os.path.exists('.env'):
    load_dotenv()

APP_NAME = "String Analyzer Service"
APP_VERSION = os.getenv("APP_VERSION", "1.0.0")

HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", 8000))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

CORS_ORIGINS = [origin.strip() for origin in os.getenv("CORS_ORIGINS", "*").split(",") if origin.strip()]


def configure_logging():
    """Configure root logging once for the whole service"""
    logging.basicConfig(level=LOG_LEVEL, format=LOG_FORMAT)
