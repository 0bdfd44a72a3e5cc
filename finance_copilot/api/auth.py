# finance_copilot/api/auth.py

import logging
from fastapi import APIRouter, Depends, status
from pydantic import BaseModel
from finance_copilot.api.deps import get_credential_store, get_session_issuer
from finance_copilot.core.credentials import CredentialStore
from finance_copilot.core.errors import InvalidCredentialsError, ValidationError
from finance_copilot.core.sessions import SessionIssuer


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")


class RegisterRequest(BaseModel):
    username: str | None = None
    email: str | None = None
    password: str | None = None


class LoginRequest(BaseModel):
    email: str | None = None
    password: str | None = None


@router.post("/register", status_code=status.HTTP_201_CREATED)
def register(
    req: RegisterRequest,
    store: CredentialStore = Depends(get_credential_store),
    issuer: SessionIssuer = Depends(get_session_issuer),
):
    logger.info("Registration attempt: username=%s email=%s", req.username, req.email)
    user = store.register(req.username, req.email, req.password)
    token = issuer.issue(user.id, user.username)
    logger.info("User registered: id=%s username=%s", user.id, user.username)
    return {
        "message": "Account created successfully! Welcome to Finance Copilot!",
        "token": token,
        "user": user.to_dict(),
    }


@router.post("/login")
def login(
    req: LoginRequest,
    store: CredentialStore = Depends(get_credential_store),
    issuer: SessionIssuer = Depends(get_session_issuer),
):
    logger.info("Login attempt: email=%s", req.email)
    if not req.email or not req.password:
        raise ValidationError("Email and password are required")

    user = store.authenticate(req.email, req.password)
    if user is None:
        raise InvalidCredentialsError()

    token = issuer.issue(user.id, user.username)
    logger.info("Login successful: id=%s username=%s", user.id, user.username)
    return {"message": "Welcome back!", "token": token, "user": user.to_dict()}
