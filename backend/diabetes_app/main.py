# backend/diabetes_app/main.py
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import APP_NAME, CORS_ORIGINS
from .db import Base, engine
from .auth import router as auth_router
from .assessments import router as assessments_router
from .dashboard import router as dashboard_router
from . import models  # noqa: F401  (registers tables on Base)

app = FastAPI(title=APP_NAME)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Create tables
Base.metadata.create_all(bind=engine)

@app.get("/status")
def status():
    return {"ok": True}


# Routers
app.include_router(auth_router)
app.include_router(assessments_router)
app.include_router(dashboard_router)
