import os
from dotenv import load_dotenv

# Load environment variables from a .env file (if present)
load_dotenv()

DEFAULT_SERVER = os.getenv("SERVER_HOST", "http://localhost:4000")

API_PREFIX = "/api/scripts/"
REQUEST_TIMEOUT = 30
SETTLE_DELAY = 0.1

LOG_DIR = os.getenv("LOG_DIR") or None
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

CONSOLE_FORMAT = '%(asctime)s - %(levelname)s - %(message)s'
CONSOLE_DATE_FORMAT = '%H:%M:%S'
