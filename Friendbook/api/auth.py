from __future__ import annotations

from fastapi import APIRouter, status

from . import schemas
from .dependencies import Service
from .errors import unwrap

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/register", response_model=schemas.AuthResponse, status_code=status.HTTP_201_CREATED)
def register(payload: schemas.RegisterRequest, service: Service) -> schemas.AuthResponse:
    session = unwrap(service.register(payload.username, payload.password, payload.full_name))
    return schemas.AuthResponse(
        message="User registered successfully",
        token=session.token,
        user=schemas.UserSummaryOut.from_user(session.user),
    )


@router.post("/login", response_model=schemas.AuthResponse)
def login(payload: schemas.LoginRequest, service: Service) -> schemas.AuthResponse:
    session = unwrap(service.authenticate(payload.username, payload.password))
    return schemas.AuthResponse(
        message="Login successful",
        token=session.token,
        user=schemas.UserSummaryOut.from_user(session.user),
    )
