# finance_copilot/api/deps.py

from fastapi import Depends, Request
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session
from finance_copilot.core.advisor import AdvisoryResponder, CompletionProvider
from finance_copilot.core.credentials import CredentialStore
from finance_copilot.core.ledger import LedgerStore
from finance_copilot.core.sessions import SessionClaims, SessionIssuer
from finance_copilot.core.summary import Aggregator
from finance_copilot.database import get_db


oauth2_scheme = OAuth2PasswordBearer(tokenUrl="api/login", auto_error=False)


def get_session_issuer(request: Request) -> SessionIssuer:
    return request.app.state.session_issuer


def get_provider(request: Request) -> CompletionProvider:
    return request.app.state.provider


def get_credential_store(request: Request, db: Session = Depends(get_db)) -> CredentialStore:
    return CredentialStore(db, request.app.state.pwd_context)


def get_ledger(db: Session = Depends(get_db)) -> LedgerStore:
    return LedgerStore(db)


def get_aggregator(db: Session = Depends(get_db)) -> Aggregator:
    return Aggregator(db)


def get_advisor(
    ledger: LedgerStore = Depends(get_ledger),
    provider: CompletionProvider = Depends(get_provider),
) -> AdvisoryResponder:
    return AdvisoryResponder(ledger, provider)


def get_current_user(
    token: str | None = Depends(oauth2_scheme),
    issuer: SessionIssuer = Depends(get_session_issuer),
) -> SessionClaims:
    return issuer.verify(token)
