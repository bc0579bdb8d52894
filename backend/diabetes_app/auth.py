from typing import Optional
import logging

from fastapi import APIRouter, Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import BaseModel, EmailStr, Field, field_validator
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from .db import get_db
from .gateway import get_user, get_user_by_email
from .models import User
from .schemas import CamelModel, UserOut
from .security import create_access_token, decode_access_token, hash_password, verify_password

router = APIRouter(prefix="/auth", tags=["auth"])
log = logging.getLogger("uvicorn.error")

bearer = HTTPBearer(auto_error=False)


class SignupIn(CamelModel):
    email: EmailStr
    password: str = Field(..., min_length=8)
    full_name: Optional[str] = Field(None, max_length=255)

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, v: str) -> str:
        if len(v.encode("utf-8")) > 72:
            raise ValueError("Password must be at most 72 bytes.")
        return v


class LoginIn(BaseModel):
    email: EmailStr
    password: str


class SignupOut(CamelModel):
    success: bool
    user_id: int


class LoginOut(BaseModel):
    success: bool
    token: str
    user: UserOut


def to_user_out(user: User) -> UserOut:
    return UserOut(
        id=user.id,
        email=user.email,
        full_name=user.full_name,
        assessment_complete=bool(user.assessment_complete),
    )


def get_current_user(
    creds: Optional[HTTPAuthorizationCredentials] = Depends(bearer),
    db: Session = Depends(get_db),
) -> Optional[User]:
    """Resolve the bearer token to a User, or None when there is no valid login."""
    if creds is None:
        return None
    claims = decode_access_token(creds.credentials)
    if not claims:
        return None
    try:
        user_id = int(claims.get("sub"))
    except (TypeError, ValueError):
        return None
    return get_user(db, user_id)


def require_user(user: Optional[User] = Depends(get_current_user)) -> User:
    if user is None:
        raise HTTPException(status_code=401, detail="Not authenticated")
    return user


@router.post("/signup", response_model=SignupOut)
def signup(payload: SignupIn, db: Session = Depends(get_db)):
    email = payload.email.strip().lower()
    if get_user_by_email(db, email):
        raise HTTPException(status_code=400, detail="User already exists")

    user = User(
        email=email,
        full_name=payload.full_name,
        password_hash=hash_password(payload.password),
        assessment_complete=False,
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        # lost a race with another signup for the same email
        db.rollback()
        raise HTTPException(status_code=400, detail="User already exists")
    db.refresh(user)
    log.info(f"[AUTH] user created uid={user.id}")
    return SignupOut(success=True, user_id=user.id)


@router.post("/login", response_model=LoginOut)
def login(payload: LoginIn, db: Session = Depends(get_db)):
    user = get_user_by_email(db, payload.email)
    if not user or not verify_password(payload.password, user.password_hash):
        log.warning("[AUTH] invalid credentials")
        raise HTTPException(status_code=401, detail="Invalid credentials")

    log.info(f"[AUTH] user logged in uid={user.id}")
    return LoginOut(success=True, token=create_access_token(user.id), user=to_user_out(user))


@router.get("/me", response_model=UserOut)
def me(user: User = Depends(require_user)):
    return to_user_out(user)


@router.post("/logout")
def logout():
    # Tokens are stateless; the client drops its copy
    return {"success": True}
