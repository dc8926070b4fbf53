import json
import logging
from dataclasses import dataclass, field
from typing import List, Optional
from urllib.parse import urlparse

from assistant import prompts
from assistant.gateway import AIGateway, AIResponse
from models import FinancialResult, InvestmentParameters

logger = logging.getLogger(__name__)

LOCATION_FALLBACK = "Location analysis failed. Please check the API key."
DEEP_DIVE_FALLBACK = "The detailed analysis could not be created."
STRATEGY_FALLBACK = "The strategy could not be calculated."
SEARCH_FALLBACK = "Search failed."
REFINE_FALLBACK = "Could not answer the question."
CHAT_FALLBACK = "Sorry, I could not generate an answer to that."


@dataclass(frozen=True)
class ListingAnalysis:
    purchase_price: Optional[float]
    location: str
    size_sqm: Optional[float]
    estimated_rent: Optional[float]
    assessment: str


@dataclass(frozen=True)
class ChatMessage:
    role: str  # 'user' or 'ai'
    text: str


def analyze_location(
    gateway: AIGateway, location: str, price: float, size_sqm: float = 0.0, renovation: float = 0.0
) -> AIResponse:
    prompt = prompts.location_prompt(location, price, size_sqm, renovation)
    return gateway.generate(prompt, search=True, fallback=LOCATION_FALLBACK)


def analyze_financial_deep_dive(
    gateway: AIGateway, params: InvestmentParameters, result: FinancialResult
) -> str:
    return gateway.generate(prompts.deep_dive_prompt(params, result), fallback=DEEP_DIVE_FALLBACK).text


def generate_portfolio_strategy(
    gateway: AIGateway,
    goal_cashflow: float,
    years: int,
    current_capital: float,
    risk_profile: str,
    target_property_count: int,
) -> AIResponse:
    prompt = prompts.portfolio_strategy_prompt(
        goal_cashflow, years, current_capital, risk_profile, target_property_count
    )
    return gateway.generate(prompt, fallback=STRATEGY_FALLBACK)


def search_market(gateway: AIGateway, query: str) -> AIResponse:
    return gateway.generate(prompts.market_search_prompt(query), search=True, fallback=SEARCH_FALLBACK)


def refine_strategy(gateway: AIGateway, strategy: str, question: str) -> str:
    return gateway.generate(prompts.refinement_prompt(strategy, question), fallback=REFINE_FALLBACK).text


def _strip_code_fence(text: str) -> str:
    text = text.strip()
    if text.startswith("```"):
        text = text.split("\n", 1)[1] if "\n" in text else ""
        if text.rstrip().endswith("```"):
            text = text.rstrip()[:-3]
    return text.strip()


def _number(value) -> Optional[float]:
    if value is None or value == "":
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def parse_listing(text: str) -> Optional[ListingAnalysis]:
    try:
        data = json.loads(_strip_code_fence(text))
    except json.JSONDecodeError:
        logger.error("Listing analysis is not valid JSON: %.200s", text)
        return None
    if isinstance(data, list):
        data = data[0] if data else {}
    if not isinstance(data, dict):
        logger.error("Listing analysis has unexpected shape: %s", type(data).__name__)
        return None
    return ListingAnalysis(
        purchase_price=_number(data.get("purchase_price")),
        location=str(data.get("location") or ""),
        size_sqm=_number(data.get("size_sqm")),
        estimated_rent=_number(data.get("estimated_rent")),
        assessment=str(data.get("assessment") or ""),
    )


def analyze_external_link(gateway: AIGateway, url: str) -> Optional[ListingAnalysis]:
    response = gateway.generate(prompts.link_analysis_prompt(url), search=True, json_output=True)
    if not response.ok:
        return None
    return parse_listing(response.text)


def display_domain(url: str) -> str:
    """Hostname for link labels, without a leading 'www.'."""
    try:
        host = urlparse(url).hostname
    except ValueError:
        host = None
    if not host:
        return "Link"
    return host[4:] if host.startswith("www.") else host


@dataclass
class StrategyChat:
    """Follow-up questions on a generated portfolio strategy."""

    strategy: str = ""
    history: List[ChatMessage] = field(default_factory=list)

    def reset(self, strategy: str) -> None:
        self.strategy = strategy
        self.history = []

    def start(self, response: Optional[AIResponse]) -> bool:
        """Open the chat on a new strategy. Failed answers leave the chat as it was."""
        if response is None or not response.ok:
            return False
        self.reset(response.text)
        return True

    def ask(self, gateway: AIGateway, question: str) -> Optional[ChatMessage]:
        question = question.strip()
        if not question or not self.strategy:
            return None
        self.history.append(ChatMessage(role="user", text=question))
        answer = refine_strategy(gateway, self.strategy, question) or CHAT_FALLBACK
        reply = ChatMessage(role="ai", text=answer)
        self.history.append(reply)
        return reply
