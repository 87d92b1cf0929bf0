# vote counts -> percentages for presentation
import time
from typing import List, Optional

from .models import OptionResult, Poll


def total_votes(poll: Poll) -> int:
    return sum(o.votes for o in poll.options)


def percentage(option_votes: int, total: int) -> int:
    """
    option_votes / total as a whole percentage, rounded half up.
    0 when nobody has voted yet.
    """
    if total <= 0:
        return 0
    # integer form of floor(x * 100 / total + 0.5)
    return (200 * option_votes + total) // (2 * total)


def ranked_results(poll: Poll) -> List[OptionResult]:
    """
    Options with their percentages, most voted first. Ties keep display order.
    """
    total = total_votes(poll)
    results = [
        OptionResult(id=o.id, text=o.text, votes=o.votes, percentage=percentage(o.votes, total))
        for o in poll.options
    ]
    return sorted(results, key=lambda r: r.votes, reverse=True)


def time_ago(created_at: int, now: Optional[int] = None) -> str:
    if now is None:
        now = int(time.time() * 1000)
    s = max(0, (now - created_at) // 1000)
    if s < 60:
        return f"{s}s ago"
    m = s // 60
    if m < 60:
        return f"{m}m ago"
    h = m // 60
    if h < 24:
        return f"{h}h ago"
    return f"{h // 24}d ago"
