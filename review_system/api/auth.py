from fastapi import APIRouter, Depends, status
from fastapi.responses import PlainTextResponse
from sqlalchemy.orm import Session

from review_system.db.session import get_db
from review_system.schemas.auth import AuthResponse, LoginRequest, RegisterRequest
from review_system.services import auth as service

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(payload: RegisterRequest, db: Session = Depends(get_db)):
    return service.register(db, payload)


@router.post("/login", response_model=AuthResponse)
def login(payload: LoginRequest, db: Session = Depends(get_db)):
    return service.login(db, payload)


@router.get("/test", response_class=PlainTextResponse)
def test_endpoint():
    return "Auth endpoint is working!"
