import os
import dotenv

# Load environment variables from .env file
dotenv.load_dotenv()

# Application Constants
APP_NAME = "IWEMS"
HOST = os.getenv("HOST", "127.0.0.1")
PORT = int(os.getenv("PORT", "8030"))

# Supabase Configuration
SUPABASE_URL = os.getenv("SUPABASE_URL")
SUPABASE_KEY = os.getenv("SUPABASE_KEY")  # anon key, row-level security applies
PORTFOLIO_BUCKET = os.getenv("PORTFOLIO_BUCKET", "vendor-portfolios")

# Local (on-device) storage used by the budget screen
BUDGET_STORAGE_KEY = "wedding-budget-data"
LOCAL_STORE_BACKEND = os.getenv("LOCAL_STORE_BACKEND", "file").lower()  # "file" or "redis"
LOCAL_STORE_PATH = os.getenv(
    "LOCAL_STORE_PATH",
    os.path.join(os.path.expanduser("~"), ".iwems", "local_storage.json"),
)
REDIS_URL = os.getenv("REDIS_URL", "redis://localhost:6379/0")

# Logging Configuration
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_TO_FILE = os.getenv("LOG_TO_FILE", "false").lower() == "true"
LOG_FILE_PATH = os.getenv("LOG_FILE_PATH", "iwems.log")

# CORS Origins
CORS_ORIGINS = [
    "http://localhost",
    "http://localhost:5173",
    "http://localhost:8030",
    "http://127.0.0.1",
    "http://127.0.0.1:8030",
    "http://localhost:8080",
]
