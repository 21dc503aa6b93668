"""Keyword rules mapping free-text sector/industry names onto Category.

Rules are evaluated in order; the first keyword contained in the lower-cased
text wins.
"""

from tracker.models import Category

CATEGORY_RULES: tuple[tuple[str, Category], ...] = (
    ("software", Category.TECHNOLOGY),
    ("semiconductor", Category.TECHNOLOGY),
    ("technology", Category.TECHNOLOGY),
    ("bank", Category.FINANCIALS),
    ("financ", Category.FINANCIALS),
    ("insurance", Category.FINANCIALS),
    ("energy", Category.ENERGY),
    ("oil", Category.ENERGY),
    ("gas", Category.ENERGY),
    ("health", Category.HEALTHCARE),
    ("biotech", Category.HEALTHCARE),
    ("pharma", Category.HEALTHCARE),
    ("industrial", Category.INDUSTRIALS),
    ("manufacturing", Category.INDUSTRIALS),
    ("consumer", Category.CONSUMER),
)


def match_category(text: str | None) -> Category | None:
    """Return the first rule's category matching ``text``, or None."""
    if not text:
        return None
    lowered = text.strip().lower()
    if not lowered:
        return None
    try:
        return Category(lowered)
    except ValueError:
        pass
    for keyword, category in CATEGORY_RULES:
        if keyword in lowered:
            return category
    return None


def classify(sector: str | None, industry: str | None = None) -> Category:
    """Classify a profile's sector and industry strings.

    A sector that no rule recognises still counts as a real classification
    and maps to OTHER; only a profile with nothing usable is UNKNOWN.
    """
    category = match_category(sector) or match_category(industry)
    if category is not None:
        return category
    if sector and sector.strip():
        return Category.OTHER
    return Category.UNKNOWN
