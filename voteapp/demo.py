# demo polls shown on a fresh install
from typing import List, Optional, Sequence, Tuple

from .ids import new_id
from .models import Option, Poll
from .state import now_ms

HOUR_MS = 1000 * 60 * 60

# question, description, [(option, votes)], category, age in hours, image
_DEMO: Sequence[Tuple[str, str, List[Tuple[str, int]], str, int, str]] = [
    (
        "Who will win the national election?",
        "Community prediction for the upcoming general election.",
        [("Party A", 42), ("Party B", 58), ("Undecided", 11)],
        "Politics",
        6,
        "https://images.unsplash.com/photo-1541872703-74c5e44368b5?w=1200&q=80&auto=format&fit=crop",
    ),
    (
        "Best smartphone of 2025?",
        "Vote for the device that impressed you most this year.",
        [("Pixel", 23), ("iPhone", 31), ("Galaxy", 19)],
        "Tech",
        30,
        "https://images.unsplash.com/photo-1511707171634-5f897ff02aa9?w=1200&q=80&auto=format&fit=crop",
    ),
    (
        "Which club wins the league?",
        "Prediction market style fan poll.",
        [("Club X", 12), ("Club Y", 28), ("Club Z", 21)],
        "Sports",
        90,
        "https://images.unsplash.com/photo-1517927033932-b3d18e61fb3a?w=1200&q=80&auto=format&fit=crop",
    ),
]


def demo_polls(now: Optional[int] = None) -> List[Poll]:
    if now is None:
        now = now_ms()
    return [
        Poll(
            id=new_id(),
            question=question,
            description=description,
            options=[Option(id=new_id(), text=text, votes=votes) for text, votes in options],
            category=category,
            created_at=now - hours * HOUR_MS,
            image_url=image,
        )
        for question, description, options, category, hours, image in _DEMO
    ]
