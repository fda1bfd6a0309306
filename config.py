import os
from dotenv import load_dotenv

# ------------------------------------------------------
# ENV & SETUP
# ------------------------------------------------------
load_dotenv()

BASE_DIR = os.path.dirname(os.path.abspath(__file__))
PUBLIC_DIR = os.path.join(BASE_DIR, "public")

DATABASE_URL = os.getenv("DATABASE_URL", f"sqlite:///{os.path.join(BASE_DIR, 'gallery.db')}")

# ------------------------------------------------------
# PATH CONFIGURATION
# ------------------------------------------------------
UPLOAD_DIR = os.getenv("UPLOAD_DIR", os.path.join(PUBLIC_DIR, "savedImages"))
# staged binaries live outside the served directory until their record is committed
STAGING_DIR = os.getenv("STAGING_DIR", os.path.join(PUBLIC_DIR, ".staging"))
CONTENT_ROOT = "/" + os.getenv("CONTENT_ROOT", "/savedImages").strip("/")

CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_FILE = os.getenv("LOG_FILE", "app.log")
