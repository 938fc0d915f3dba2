# app/services/categorizer.py
"""Keyword-based categorization of receipt text.

OCR text is split into lines, lines that look like ``<item name>  $<price>``
become items, totals/tax lines are dropped, and every item gets a category
from an ordered keyword table:

    Milk 2% Gallon        $4.50   -> Groceries (0.90)
    Xyzzyplugh Widget     $1.00   -> Miscellaneous (0.30)

Matching is first-match-wins: categories are tried in table order and, inside a
category, keywords in their listed order. Reordering the table changes results.

Everything here is pure; a Categorizer holds only its (immutable) taxonomy and
can be shared between requests.
"""
import logging
import re
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

logger = logging.getLogger(__name__)

KEYWORD_CONFIDENCE = 0.90
FALLBACK_CONFIDENCE = 0.30
FALLBACK_CATEGORY = "Miscellaneous"

# substrings that mark summary lines; "subtotal" is covered by "total" but kept explicit
EXCLUDED_NAME_SUBSTRINGS = ("total", "subtotal", "tax")

_CENTS = Decimal("0.01")

# <name containing a letter> <spaces> $<digits>.<2 digits> <end of line>
_ITEM_LINE_RE = re.compile(
    r"^\s*(?P<name>(?=[^$]*?[A-Za-z])[^\s$][^$]*?)\s+\$(?P<amount>\d+\.\d{2})\s*$"
)


@dataclass(frozen=True)
class ParsedItem:
    raw_name: str
    amount: Decimal


@dataclass(frozen=True)
class CategorizedItem:
    item: str
    amount: Decimal
    category: str
    confidence: float

    def to_dict(self) -> Dict:
        return {
            "item": self.item,
            "amount": float(self.amount),
            "category": self.category,
            "confidence": self.confidence,
        }


@dataclass(frozen=True)
class ScanResult:
    categorized_items: Tuple[CategorizedItem, ...]
    total_amount: Decimal
    categories_created: Tuple[str, ...]

    def to_dict(self) -> Dict:
        """Wire shape used by the scanner endpoints (camelCase keys, plain numbers)."""
        return {
            "categorizedItems": [ci.to_dict() for ci in self.categorized_items],
            "totalAmount": float(self.total_amount),
            "categoriesCreated": list(self.categories_created),
        }


@dataclass(frozen=True)
class CategoryRule:
    name: str
    keywords: Tuple[str, ...]


@dataclass(frozen=True)
class Taxonomy:
    """Ordered (category, keywords) table. Order is significant."""

    rules: Tuple[CategoryRule, ...]
    fallback: str = FALLBACK_CATEGORY

    @classmethod
    def from_pairs(cls, pairs: Iterable[Tuple[str, Sequence[str]]], fallback: str = FALLBACK_CATEGORY) -> "Taxonomy":
        """Build from (name, keywords) pairs; keywords are lowercased, order kept."""
        rules = []
        for name, keywords in pairs:
            cleaned = tuple(kw.strip().lower() for kw in keywords if kw and kw.strip())
            rules.append(CategoryRule(name=name, keywords=cleaned))
        return cls(rules=tuple(rules), fallback=fallback)

    @property
    def category_names(self) -> List[str]:
        return [rule.name for rule in self.rules]


DEFAULT_TAXONOMY = Taxonomy.from_pairs([
    ("Groceries", [
        "milk", "bread", "bananas", "chicken", "eggs", "pasta", "tomatoes", "cheese",
        "grocery", "food", "produce", "meat", "dairy", "bakery", "cereal", "snacks",
        "vegetables", "fruits", "fish", "beef", "pork", "yogurt", "butter", "rice",
        "beans", "nuts", "cookies", "chips", "soda", "juice", "water", "coffee",
        "organic", "whole", "greek", "apples", "gala",
    ]),
    ("Gas & Transportation", [
        "gas", "fuel", "gasoline", "petrol", "diesel", "oil", "lube", "car wash",
        "parking", "toll", "uber", "lyft", "taxi", "bus", "train", "metro",
    ]),
    ("Restaurants & Dining", [
        "restaurant", "cafe", "coffee", "pizza", "burger", "sandwich", "salad",
        "diner", "fast food", "delivery", "takeout", "bar", "pub", "grill",
        "starbucks", "latte", "muffin", "croissant",
    ]),
    ("Entertainment", [
        "movie", "theater", "cinema", "concert", "show", "game", "sports",
        "netflix", "spotify", "streaming", "subscription", "ticket", "event",
    ]),
    ("Shopping", [
        "clothing", "shirt", "pants", "shoes", "jacket", "dress", "electronics",
        "phone", "computer", "tablet", "accessories", "jewelry", "watch",
    ]),
    ("Health & Medical", [
        "pharmacy", "medicine", "prescription", "doctor", "hospital", "clinic",
        "vitamins", "supplements", "medical", "health", "dental", "vision",
    ]),
    ("Home & Utilities", [
        "rent", "mortgage", "electricity", "water", "gas bill", "internet",
        "cable", "phone bill", "insurance", "maintenance", "repair", "cleaning",
    ]),
    ("Personal Care", [
        "shampoo", "soap", "toothpaste", "deodorant", "makeup", "skincare",
        "razor", "shaving", "cosmetics", "hygiene", "beauty", "haircut",
    ]),
])


def parse_line(line: str) -> Optional[ParsedItem]:
    """Return a ParsedItem for an item line, None for noise or summary lines."""
    m = _ITEM_LINE_RE.match(line or "")
    if not m:
        return None
    name = m.group("name").strip()
    lowered = name.lower()
    if any(sub in lowered for sub in EXCLUDED_NAME_SUBSTRINGS):
        return None
    return ParsedItem(raw_name=name, amount=Decimal(m.group("amount")))


def parse_lines(text: str) -> List[ParsedItem]:
    """Parse newline-separated OCR text. Never raises; may return an empty list."""
    items = []
    for line in (text or "").split("\n"):
        parsed = parse_line(line)
        if parsed is not None:
            items.append(parsed)
    return items


class Categorizer:
    def __init__(self, taxonomy: Taxonomy = DEFAULT_TAXONOMY):
        self.taxonomy = taxonomy

    def categorize(self, item_name: str) -> Tuple[str, float]:
        lowered = (item_name or "").lower()
        for rule in self.taxonomy.rules:
            for keyword in rule.keywords:
                if keyword in lowered:
                    return rule.name, KEYWORD_CONFIDENCE
        return self.taxonomy.fallback, FALLBACK_CONFIDENCE

    def scan(self, text: str) -> ScanResult:
        """Parse, categorize and total a receipt in one pass."""
        items: List[CategorizedItem] = []
        seen: Dict[str, None] = {}
        running = Decimal("0")

        for parsed in parse_lines(text):
            category, confidence = self.categorize(parsed.raw_name)
            items.append(CategorizedItem(
                item=parsed.raw_name,
                amount=parsed.amount,
                category=category,
                confidence=confidence,
            ))
            seen.setdefault(category, None)
            running += parsed.amount

        total = running.quantize(_CENTS, rounding=ROUND_HALF_UP)
        logger.debug("categorized %d receipt items, total=%s", len(items), total)
        return ScanResult(
            categorized_items=tuple(items),
            total_amount=total,
            categories_created=tuple(seen),
        )


_default_categorizer = Categorizer()


def categorize_receipt_text(text: str, taxonomy: Optional[Taxonomy] = None) -> ScanResult:
    categorizer = Categorizer(taxonomy) if taxonomy is not None else _default_categorizer
    return categorizer.scan(text)


def available_categories(taxonomy: Optional[Taxonomy] = None) -> List[str]:
    return (taxonomy or DEFAULT_TAXONOMY).category_names


# export-friendly names for router imports
__all__ = [
    "ParsedItem",
    "CategorizedItem",
    "ScanResult",
    "CategoryRule",
    "Taxonomy",
    "DEFAULT_TAXONOMY",
    "Categorizer",
    "parse_line",
    "parse_lines",
    "categorize_receipt_text",
    "available_categories",
]
