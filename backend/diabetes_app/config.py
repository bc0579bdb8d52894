# backend/diabetes_app/config.py
import os
from pathlib import Path
from dotenv import load_dotenv

ENV_PATH = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(dotenv_path=ENV_PATH)

APP_NAME = os.getenv("APP_NAME", "Diabetes Risk Assessment")

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./diabetes_app.db")

# Signing key for access tokens; override in any real deployment
SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-change-me")
TOKEN_ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", str(60 * 24 * 7)))

CORS_ORIGINS = [
    o.strip()
    for o in os.getenv("CORS_ORIGINS", "http://localhost:5173,http://127.0.0.1:5173").split(",")
    if o.strip()
]
