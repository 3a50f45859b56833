import os

# ---------------------------
# Configuration
# ---------------------------
BACKEND_BASE = os.getenv("BACKEND_BASE", "http://127.0.0.1:8000")
GET_TIMEOUT = float(os.getenv("BACKEND_GET_TIMEOUT", "4"))
WRITE_TIMEOUT = float(os.getenv("BACKEND_WRITE_TIMEOUT", "8"))

# JSON file standing in for the browser's local storage.
STORE_PATH = os.getenv("FAMILY_STORE_PATH", os.path.join(os.path.expanduser("~"), ".family_health", "local_store.json"))
MEMBERS_KEY = "family_members"

DEFAULT_USER_ID = os.getenv("DEFAULT_USER_ID", "demo-user")
