# finance_copilot/api/chat.py

import logging
from datetime import datetime, timezone
from fastapi import APIRouter, Depends
from pydantic import BaseModel
from finance_copilot.api.deps import get_advisor, get_current_user
from finance_copilot.core.advisor import AdvisoryResponder
from finance_copilot.core.sessions import SessionClaims


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")


class ChatRequest(BaseModel):
    message: str | None = None


@router.post("/chat")
def chat(
    req: ChatRequest,
    current_user: SessionClaims = Depends(get_current_user),
    advisor: AdvisoryResponder = Depends(get_advisor),
):
    logger.info("Chat message from user %s", current_user.user_id)
    advice = advisor.advise(current_user.user_id, req.message)
    return {
        "success": True,
        "message": advice.text,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
