# finance_copilot/core/ledger.py

import logging
import math
import datetime
from typing import List, Optional, Union
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from finance_copilot.core.errors import InternalError, ValidationError
from finance_copilot.models import Transaction, TransactionKind


logger = logging.getLogger(__name__)


def _is_blank(value) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _parse_amount(amount) -> float:
    if isinstance(amount, bool):
        raise ValidationError("Amount must be a number", field="amount")
    try:
        value = float(amount)
    except (TypeError, ValueError):
        raise ValidationError("Amount must be a number", field="amount")
    if not math.isfinite(value) or value <= 0:
        raise ValidationError("Amount must be greater than 0", field="amount")
    return value


def _parse_kind(kind: str) -> TransactionKind:
    try:
        return TransactionKind(kind)
    except ValueError:
        raise ValidationError("Type must be income or expense", field="type")


def _parse_date(value: Union[str, datetime.date]) -> datetime.date:
    if isinstance(value, datetime.datetime):
        return value.date()
    if isinstance(value, datetime.date):
        return value
    try:
        return datetime.date.fromisoformat(str(value).strip())
    except ValueError:
        raise ValidationError("Date must be in YYYY-MM-DD format", field="date")


class LedgerStore:
    """Per-user, append-only transaction storage."""

    def __init__(self, db: Session):
        self.db = db

    def insert(self, user_id: int, description: str, amount, kind: str,
               category: str, date: Union[str, datetime.date]) -> Transaction:
        required = {
            "description": description,
            "amount": amount,
            "type": kind,
            "category": category,
            "date": date,
        }
        missing = [name for name, value in required.items() if _is_blank(value)]
        if missing:
            raise ValidationError("All fields are required", field=missing[0])

        transaction = Transaction(
            user_id=user_id,
            description=description,
            amount=_parse_amount(amount),
            kind=_parse_kind(kind).value,
            category=category,
            date=_parse_date(date),
        )

        try:
            self.db.add(transaction)
            self.db.commit()
            self.db.refresh(transaction)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.exception("Add transaction failed for user %s", user_id)
            raise InternalError("Failed to add transaction") from e

        logger.info("Transaction %s added for user %s (%s %.2f, %s)",
                    transaction.id, user_id, transaction.kind, transaction.amount, transaction.category)
        return transaction

    def list_by_user(self, user_id: int, limit: Optional[int] = None) -> List[Transaction]:
        try:
            query = (
                self.db.query(Transaction)
                .filter(Transaction.user_id == user_id)
                .order_by(Transaction.created_at.desc(), Transaction.id.desc())
            )
            if limit is not None:
                query = query.limit(limit)
            transactions = query.all()
        except SQLAlchemyError as e:
            logger.exception("Get transactions failed for user %s", user_id)
            raise InternalError("Failed to fetch transactions") from e

        logger.info("Retrieved %d transactions for user %s", len(transactions), user_id)
        return transactions
