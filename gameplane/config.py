import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./gameplane.db")

PORT = int(os.getenv("PORT", "3000"))

# Firebase Configuration
# Service account JSON, base64-encoded so it fits in a single env var
FIREBASE_CREDENTIALS_B64 = os.getenv("FIREBASE_CREDENTIALS_B64")
FIREBASE_PROJECT_ID = os.getenv("FIREBASE_PROJECT_ID")

# Dodo Payments Configuration
DODO_PAYMENTS_API_KEY = os.getenv("DODO_PAYMENTS_API_KEY")
# "test_mode" or "live_mode" - default to test for safety
DODO_PAYMENTS_ENVIRONMENT = os.getenv("DODO_PAYMENTS_ENVIRONMENT", "test_mode")
# Pay-what-you-want product; every slot payment is a checkout of this product with a custom amount
DODO_ADHOC_PRODUCT_ID = os.getenv("DODO_ADHOC_PRODUCT_ID")

# Frontend base URL for redirects
FRONTEND_URL = os.getenv("FRONTEND_URL", "http://localhost:5173")
PAYMENT_RETURN_URL = os.getenv("PAYMENT_RETURN_URL", f"{FRONTEND_URL}/dashboard/payment-history")

ALLOWED_ORIGINS = os.getenv(
    "ALLOWED_ORIGINS",
    "http://localhost:5173,http://localhost:3000",
).split(",")

# Redis cache for dashboard aggregates (disabled when unset)
REDIS_URL = os.getenv("REDIS_URL")
DASHBOARD_CACHE_TTL = int(os.getenv("DASHBOARD_CACHE_TTL", "60"))
