"""Spending categorization - ordered keyword rules over merchant/description text"""

import re
from dataclasses import replace
from typing import Dict, List, Tuple

from forecast_gateway.domain.models import CashFlowEvent, CategoryRow, has_valid_amount

OTHER = "Other"

# Rule order encodes priority: the first matching rule wins.
FULL_TAXONOMY_RULES: List[Tuple[str, str]] = [
    ("Telecom", r"\b(verizon|at&t|att|t ?mobile|tmobile|sprint|wireless)\b"),
    ("Telecom", r"\b(comcast|xfinity|spectrum|cox|centurylink|cable|internet|broadband)\b"),
    ("Utilities", r"\b(power|electric|electricity|utility|utilities|water|sewer|gas)\b"),
    ("Utilities", r"\b(dominion|georgia power|washington gas|dc water|pepco|coned|pg&e|pge)\b"),
    ("Debt", r"\b(credit ?card|loan|mortgage|auto ?loan|student ?loan|debt|financ(e|ing))\b"),
    ("Subscriptions", r"\b(netflix|spotify|hulu|disney\+?|max|hbomax|youtube premium|apple music|prime video)\b"),
    ("Housing", r"\b(rent|landlord|property ?management|apartment|mortgage)\b"),
    ("Insurance", r"\b(insurance|geico|state farm|allstate|progressive|usaa)\b"),
    ("Transportation", r"\b(uber|lyft|gasoline|fuel|shell|chevron|exxon|metro|transit|parking|toll)\b"),
    ("Groceries", r"\b(whole foods|trader joe ?s|kroger|safeway|albertsons|publix|heb|costco|sam ?s club|aldi)\b"),
    ("Dining", r"\b(starbucks|mcdonald ?s|chipotle|chick ?fil ?a|doordash|ubereats|grubhub|restaurant|cafe)\b"),
    ("Health", r"\b(pharmacy|walgreens|cvs|rite aid|clinic|hospital|dental|vision)\b"),
    ("Shopping", r"\b(amazon|walmart|target|best buy|ikea|home depot|lowe ?s)\b"),
    ("Travel", r"\b(airlines?|hotel|marriott|hilton|airbnb|booking com|expedia)\b"),
    # Generic merchant names that slipped through the word-bounded rules
    (OTHER, r"misc"),
    ("Debt", r"credit ?card"),
    ("Telecom", r"cable"),
    ("Utilities", r"power|utility|water|gas"),
]

LITE_TAXONOMY_RULES: List[Tuple[str, str]] = [
    ("Groceries", r"\b(grocery|groceries|market|supermarket|whole foods|trader joe ?s|kroger|safeway|aldi|costco)\b"),
    ("Rent", r"\b(rent|landlord|apartment|property ?management|mortgage)\b"),
    ("Utilities", r"\b(util|utility|utilities|electric|power|water|gas|internet|phone|cable)\b"),
    ("Entertainment", r"\b(netflix|spotify|hulu|prime|movie|cinema|theater|concert|game|games|steam)\b"),
    ("Transport", r"\b(uber|lyft|bus|metro|transit|train|fuel|gasoline|parking|toll)\b"),
]

TAXONOMIES: Dict[str, List[Tuple[re.Pattern, str]]] = {
    name: [(re.compile(pattern), label) for label, pattern in rules]
    for name, rules in (("full", FULL_TAXONOMY_RULES), ("lite", LITE_TAXONOMY_RULES))
}

_PUNCTUATION = re.compile(r"[.\-_,']")
_WHITESPACE = re.compile(r"\s+")


def normalize_text(text: str | None) -> str:
    """Lower-case, turn separator punctuation into spaces and collapse whitespace"""
    lowered = (text or "").lower()
    return _WHITESPACE.sub(" ", _PUNCTUATION.sub(" ", lowered)).strip()


def categorize(text: str | None, taxonomy: str = "full") -> str:
    """
    Map a merchant/description string to a category label.

    Total and deterministic: text no rule recognizes maps to "Other".
    Under the full taxonomy Transportation is listed before Dining, so any
    description containing the word "uber" (including "Uber Eats") is
    Transportation.

    Raises:
        ValueError: if taxonomy is not "full" or "lite"
    """
    try:
        rules = TAXONOMIES[taxonomy]
    except KeyError:
        raise ValueError(f"Unknown taxonomy: {taxonomy!r}") from None

    normalized = normalize_text(text)
    for pattern, label in rules:
        if pattern.search(normalized):
            return label
    return OTHER


def tag_categories(events: List[CashFlowEvent], taxonomy: str = "full") -> List[CashFlowEvent]:
    """Return copies of the events with `category` derived from their description"""
    return [replace(e, category=categorize(e.description, taxonomy)) for e in events]


def rollup_categories(events: List[CashFlowEvent]) -> List[CategoryRow]:
    """
    Sum amounts and count events per category.

    Rows come out in order of each category's first occurrence; callers that
    want a ranking sort by total themselves. Events without a category count
    as "Other"; events with an unusable amount are skipped.
    """
    totals: Dict[str, float] = {}
    counts: Dict[str, int] = {}
    for event in events:
        if not has_valid_amount(event):
            continue
        label = event.category or OTHER
        totals[label] = totals.get(label, 0.0) + event.amount
        counts[label] = counts.get(label, 0) + 1

    return [
        CategoryRow(category=label, total=round(total, 2), count=counts[label])
        for label, total in totals.items()
    ]
