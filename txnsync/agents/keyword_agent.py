"""KeywordAgent: deterministic keyword-based categorization for the development server."""

import re
import unicodedata

from txnsync.agents.base import FALLBACK_CATEGORY_KEY, BaseAgent, CategorizationResult
from txnsync.core.utils import get_logger

logger = get_logger("txnsync.agent")

MAX_DESCRIPTION_LEN = 255

DEFAULT_RULES: dict[str, tuple[str, ...]] = {
    "groceries": ("biedronka", "lidl", "zabka", "auchan", "carrefour", "grocer", "market", "zakupy"),
    "transport": ("uber", "bolt", "orlen", "shell", "bp", "paliwo", "pkp", "bilet", "taxi", "fuel"),
    "restaurants": ("restauracja", "pizza", "kebab", "mcdonald", "kfc", "starbucks", "coffee", "kawa"),
    "housing": ("czynsz", "rent", "prad", "gaz", "woda", "internet"),
    "entertainment": ("netflix", "spotify", "kino", "cinema", "hbo", "steam", "concert"),
    "health": ("apteka", "pharmacy", "lekarz", "doctor", "dentysta", "medicover", "luxmed"),
    "salary": ("wynagrodzenie", "salary", "pensja", "payroll"),
}


def _normalize(text: str) -> str:
    """Lowercase and strip diacritics so that 'Żabka' matches 'zabka'."""
    text = unicodedata.normalize("NFKD", text.replace("ł", "l").replace("Ł", "L"))
    return "".join(ch for ch in text if not unicodedata.combining(ch)).lower()


class KeywordAgent(BaseAgent):
    """Agent that matches description words against per-category keyword lists."""

    def __init__(self, rules: dict[str, tuple[str, ...]] | None = None) -> None:
        """Initialize the agent with keyword rules keyed by category key."""
        self.rules = rules if rules is not None else DEFAULT_RULES

    def categorize(self, description: str, category_keys: list[str]) -> CategorizationResult:
        """Return the first category whose keyword occurs as a word in the description, else ``other``."""
        words = set(re.findall(r"\w+", _normalize(description[:MAX_DESCRIPTION_LEN])))
        for key, keywords in self.rules.items():
            if key not in category_keys:
                continue
            hits = [kw for kw in keywords if kw in words]
            if hits:
                logger.info(f"Categorized '{description}' as '{key}' (matched {hits})")
                return CategorizationResult(category_key=key, confidence=0.9, reasoning=f"matched {', '.join(hits)}")
        logger.info(f"No keyword matched '{description}', falling back to '{FALLBACK_CATEGORY_KEY}'")
        return CategorizationResult(category_key=FALLBACK_CATEGORY_KEY, confidence=0.0, reasoning="no keyword matched")
