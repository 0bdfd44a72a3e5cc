# finance_copilot/core/advisor.py

import logging
from dataclasses import dataclass
from typing import Optional, Protocol, Sequence
from langchain_core.messages import HumanMessage, SystemMessage
from langchain_openai import ChatOpenAI
from finance_copilot.core.errors import ValidationError
from finance_copilot.core.ledger import LedgerStore
from finance_copilot.models import Transaction


logger = logging.getLogger(__name__)

RECENT_TRANSACTION_LIMIT = 20
PLACEHOLDER_API_KEY = "your-api-key-here"

PROVIDER = "provider"
FALLBACK = "fallback"

system_prompt = (
    "You are Finance Copilot, a helpful AI financial advisor. "
    "You give personalized financial advice based on the user's own data. "
    "Keep responses concise, helpful and encouraging.\n\n"
    "User's financial context: {context}\n\n"
    "Give practical, actionable advice. If the user asks about budgeting, spending patterns, "
    "savings, investments or financial planning, use their transaction data to make the "
    "suggestions personal. Be supportive while staying realistic about financial goals."
)

# (keywords, response), first match wins
FALLBACK_RULES = (
    (("budget",),
     "For budgeting, I recommend the 50/30/20 rule: 50% for needs, 30% for wants, and 20% "
     "for savings. Track your expenses regularly to stay on top of your financial goals!"),
    (("save", "saving"),
     "Start saving by setting up automatic transfers to a separate savings account. Even "
     "$25-50 per week adds up quickly! Emergency funds should cover 3-6 months of expenses."),
    (("debt",),
     "For debt management, consider the debt snowball method (pay minimums on all debts, then "
     "focus extra payments on the smallest balance) or the avalanche method (focus on the "
     "highest interest rates first)."),
    (("invest",),
     "Before investing, make sure you have an emergency fund. Consider low-cost index funds for "
     "long-term growth. Start small and increase gradually as you learn more about investing."),
)

DEFAULT_FALLBACK = (
    "I'm here to help with your finances! Try asking about budgeting, saving strategies, debt "
    "management, or spending analysis. I can give personalized advice based on your "
    "transaction history."
)

FALLBACK_NOTE = "\n\n(Note: AI service temporarily unavailable - showing helpful financial tip instead)"


class ProviderUnavailableError(Exception):
    pass


class CompletionProvider(Protocol):
    def complete(self, system: str, message: str) -> str:
        ...


class OpenAIChatProvider:
    """Chat completion through langchain's OpenAI chat model."""

    def __init__(self, api_key: Optional[str], model: str = "gpt-4o-mini",
                 max_tokens: int = 300, temperature: float = 0.7, timeout: float = 20.0):
        self.api_key = api_key
        self.model = model
        self.max_tokens = max_tokens
        self.temperature = temperature
        self.timeout = timeout
        self._llm = None

    @classmethod
    def from_settings(cls, settings) -> "OpenAIChatProvider":
        return cls(
            api_key=settings.openai_api_key,
            model=settings.openai_model,
            max_tokens=settings.openai_max_tokens,
            temperature=settings.openai_temperature,
            timeout=settings.openai_timeout,
        )

    @property
    def configured(self) -> bool:
        return bool(self.api_key) and self.api_key != PLACEHOLDER_API_KEY

    def _get_llm(self) -> ChatOpenAI:
        if self._llm is None:
            self._llm = ChatOpenAI(
                model=self.model,
                api_key=self.api_key,
                max_tokens=self.max_tokens,
                temperature=self.temperature,
                timeout=self.timeout,
                max_retries=0,
            )
        return self._llm

    def complete(self, system: str, message: str) -> str:
        if not self.configured:
            raise ProviderUnavailableError("OpenAI API key not configured")

        response = self._get_llm().invoke([
            SystemMessage(content=system),
            HumanMessage(content=message),
        ])
        content = response.content
        if not isinstance(content, str) or not content.strip():
            raise ProviderUnavailableError("Empty completion")
        return content


@dataclass(frozen=True)
class Advice:
    text: str
    source: str


def render_context(transactions: Sequence[Transaction]) -> str:
    if not transactions:
        return "No recent transactions available."
    entries = [
        f"{t.kind} of ${t.amount:.2f} for {t.description} ({t.category}) on {t.date.isoformat()}"
        for t in transactions
    ]
    return "Recent transactions: " + ", ".join(entries)


def select_fallback(question: str) -> str:
    lowered = question.lower()
    for keywords, response in FALLBACK_RULES:
        if any(keyword in lowered for keyword in keywords):
            return response
    return DEFAULT_FALLBACK


class AdvisoryResponder:
    def __init__(self, ledger: LedgerStore, provider: CompletionProvider,
                 history_limit: int = RECENT_TRANSACTION_LIMIT):
        self.ledger = ledger
        self.provider = provider
        self.history_limit = history_limit

    def advise(self, user_id: int, question: str) -> Advice:
        if not question or not question.strip():
            raise ValidationError("Message is required", field="message")

        recent = self.ledger.list_by_user(user_id, limit=self.history_limit)
        prompt = system_prompt.format(context=render_context(recent))

        try:
            text = self.provider.complete(prompt, question)
        except Exception as e:
            logger.warning("AI provider failed for user %s: %s", user_id, e)
            return Advice(text=select_fallback(question) + FALLBACK_NOTE, source=FALLBACK)

        logger.info("AI response generated for user %s", user_id)
        return Advice(text=text, source=PROVIDER)
