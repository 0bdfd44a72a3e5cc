# finance_copilot/models/__init__.py

from datetime import datetime, timezone
from sqlalchemy.orm import declarative_base


Base = declarative_base()


def utcnow() -> datetime:
    # stored without tzinfo, always UTC
    return datetime.now(timezone.utc).replace(tzinfo=None)


from .user import User  # noqa: E402
from .transaction import Transaction, TransactionKind  # noqa: E402
