# tikerama/utils/settings.py
import os
from dotenv import load_dotenv

load_dotenv()

API_URL = os.getenv("API_URL", "http://localhost:8000/api/v1")
API_TIMEOUT_SECONDS = float(os.getenv("API_TIMEOUT_SECONDS", 30))
API_RETRY_ATTEMPTS = int(os.getenv("API_RETRY_ATTEMPTS", 3))

REDIS_URL = os.getenv("REDIS_URL", "redis://redis:6379/0")
STORAGE_BACKEND = os.getenv("STORAGE_BACKEND", "redis")
SESSION_TTL_SECONDS = int(os.getenv("SESSION_TTL_SECONDS", 2 * 60 * 60))

PAYMENT_COOLDOWN_SECONDS = int(os.getenv("PAYMENT_COOLDOWN_SECONDS", 5 * 60))
PAYMENT_GATEWAY = os.getenv("PAYMENT_GATEWAY", "mock")
PAYMENT_MOCK_DELAY_SECONDS = float(os.getenv("PAYMENT_MOCK_DELAY_SECONDS", 0))

CURRENCY_CODE = os.getenv("CURRENCY_CODE", "XOF")
CURRENCY_SYMBOL = os.getenv("CURRENCY_SYMBOL", "FCFA")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
