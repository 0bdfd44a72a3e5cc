# finance_copilot/core/summary.py

import logging
from dataclasses import dataclass
from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from finance_copilot.core.errors import InternalError
from finance_copilot.models import Transaction, TransactionKind


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Summary:
    total_income: float = 0
    total_expenses: float = 0
    balance: float = 0
    transaction_count: int = 0

    def to_dict(self):
        return {
            "totalIncome": self.total_income,
            "totalExpenses": self.total_expenses,
            "balance": self.balance,
            "transactionCount": self.transaction_count,
        }


class Aggregator:
    """Income, expense, balance and count totals over one user's ledger."""

    def __init__(self, db: Session):
        self.db = db

    def summarize(self, user_id: int) -> Summary:
        try:
            rows = (
                self.db.query(
                    Transaction.kind,
                    func.sum(Transaction.amount),
                    func.count(Transaction.id),
                )
                .filter(Transaction.user_id == user_id)
                .group_by(Transaction.kind)
                .all()
            )
        except SQLAlchemyError as e:
            logger.exception("Get summary failed for user %s", user_id)
            raise InternalError("Failed to fetch summary") from e

        totals = {TransactionKind.INCOME.value: 0, TransactionKind.EXPENSE.value: 0}
        count = 0
        for kind, total, group_count in rows:
            if kind in totals:
                totals[kind] = total or 0
            count += group_count

        income = totals[TransactionKind.INCOME.value]
        expenses = totals[TransactionKind.EXPENSE.value]
        summary = Summary(
            total_income=income,
            total_expenses=expenses,
            balance=income - expenses,
            transaction_count=count,
        )
        logger.info("Summary for user %s: %s", user_id, summary)
        return summary
