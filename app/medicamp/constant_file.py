from dotenv import load_dotenv
import os

# Load environment variables from .env
load_dotenv()

# ----------------------- Database -----------------------
DB_USER = os.getenv("DB_USER")
DB_PASSWORD = os.getenv("DB_PASSWORD")
DB_HOST = os.getenv("DB_HOST", "cluster0.mongodb.net")
DB_NAME = os.getenv("DB_NAME", "medicalCampDB")
DB_TIMEOUT_MS = int(os.getenv("DB_TIMEOUT_MS", 5000))

if os.getenv("DB_URI"):
    DB_URI = os.getenv("DB_URI")
elif DB_USER and DB_PASSWORD:
    DB_URI = f"mongodb+srv://{DB_USER}:{DB_PASSWORD}@{DB_HOST}/?retryWrites=true&w=majority"
else:
    DB_URI = "mongodb://localhost:27017"

# ----------------------- Session tokens -----------------------
ACCESS_TOKEN_SECRET = os.getenv("ACCESS_TOKEN_SECRET", "dev-secret-change-me")
TOKEN_ALGORITHM = "HS256"
TOKEN_EXPIRE_HOURS = int(os.getenv("TOKEN_EXPIRE_HOURS", 24))

# Empty means header-only bearer auth
AUTH_COOKIE_NAME = os.getenv("AUTH_COOKIE_NAME", "")

# 0 disables the role cache, every gated request hits the users collection
ROLE_CACHE_SECONDS = int(os.getenv("ROLE_CACHE_SECONDS", 0))

# Bounds on offset paging, keeps page * size inside what the store accepts as a skip
MAX_PAGE = 100000
MAX_PAGE_SIZE = 1000

# ----------------------- Third party APIs -----------------------
STRIPE_SECRET_KEY = os.getenv("STRIPE_SECRET_KEY", "")
STRIPE_API_URL = "https://api.stripe.com/v1/payment_intents"

CD_KEY = os.getenv("CD_KEY", "")
CLIPDROP_API_URL = "https://clipdrop-api.co/text-to-image/v1"

IMGBB_API_KEY = os.getenv("IMGBB_API_KEY", "")
IMGBB_API_URL = "https://api.imgbb.com/1/upload"

UPSTREAM_TIMEOUT = float(os.getenv("UPSTREAM_TIMEOUT", 30))

# ----------------------- Server -----------------------
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
PORT = int(os.getenv("PORT", 5000))

# ----------------------- Collections -----------------------
USERS = "users"
CAMPS = "camps"
PARTICIPANTS = "participants"
PAYMENTS = "payments"
FEEDBACKS = "feedbacks"
AI_IMAGES = "aiImages"
