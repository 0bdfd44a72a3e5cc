# finance_copilot/api/transactions.py

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel
from finance_copilot.api.deps import get_aggregator, get_current_user, get_ledger
from finance_copilot.core.ledger import LedgerStore
from finance_copilot.core.sessions import SessionClaims
from finance_copilot.core.summary import Aggregator


router = APIRouter(prefix="/api")


class TransactionCreateRequest(BaseModel):
    description: str | None = None
    amount: float | None = None
    type: str | None = None
    category: str | None = None
    date: str | None = None


@router.get("/transactions")
def list_transactions(
    current_user: SessionClaims = Depends(get_current_user),
    ledger: LedgerStore = Depends(get_ledger),
):
    transactions = ledger.list_by_user(current_user.user_id)
    return {"transactions": [t.to_dict() for t in transactions]}


@router.post("/transactions", status_code=status.HTTP_201_CREATED)
def add_transaction(
    req: TransactionCreateRequest,
    current_user: SessionClaims = Depends(get_current_user),
    ledger: LedgerStore = Depends(get_ledger),
):
    transaction = ledger.insert(
        user_id=current_user.user_id,
        description=req.description,
        amount=req.amount,
        kind=req.type,
        category=req.category,
        date=req.date,
    )
    return {"message": "Transaction added successfully!", "transaction": transaction.to_dict()}


@router.get("/summary")
def get_summary(
    current_user: SessionClaims = Depends(get_current_user),
    aggregator: Aggregator = Depends(get_aggregator),
):
    summary = aggregator.summarize(current_user.user_id)
    return {"summary": summary.to_dict()}
