# derived projections of the poll collection for display
from typing import List, Sequence

from .config import ALL_CATEGORIES
from .models import Poll


def categories(polls: Sequence[Poll]) -> List[str]:
    """
    "All" followed by every distinct category, in first-seen order.
    """
    result = [ALL_CATEGORIES]
    for p in polls:
        if p.category not in result:
            result.append(p.category)
    return result


def filter_polls(
    polls: Sequence[Poll],
    category_filter: str = ALL_CATEGORIES,
    search_text: str = "",
) -> List[Poll]:
    needle = (search_text or "").lower()
    return [
        p
        for p in polls
        if (category_filter == ALL_CATEGORIES or p.category == category_filter)
        and needle in p.question.lower()
    ]
