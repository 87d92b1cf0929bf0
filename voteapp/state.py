# in-memory poll collection + vote ledger, persisted on every mutation
import logging
import threading
import time
from typing import Callable, Iterable, List, Optional

from .config import DEFAULT_CATEGORY
from .ids import new_id
from .models import Option, Poll, PollDraft, VoteLedger
from .persistence import Persistence
from .remote import BackgroundRunner, RemoteSyncClient

logger = logging.getLogger(__name__)


def now_ms() -> int:
    return int(time.time() * 1000)


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


class PollStore:
    """
    Owns the poll collection (newest first) and the vote ledger
    (poll_id -> option_id, at most one entry per poll).

    Lifecycle: construct -> hydrate() -> create_poll / vote / delete_poll.
    Every mutation is applied locally, persisted, and only then handed to the
    remote client on the background runner without waiting for it.
    Readers get snapshots; a single lock serializes mutations and reads.
    """

    def __init__(
        self,
        persistence: Persistence,
        remote: Optional[RemoteSyncClient] = None,
        runner: Optional[BackgroundRunner] = None,
        clock: Callable[[], int] = now_ms,
    ):
        self.persistence = persistence
        self.remote = remote or RemoteSyncClient()
        self.runner = runner or BackgroundRunner()
        self.clock = clock
        self._polls: List[Poll] = []
        self._votes: VoteLedger = {}
        self._last_created_at = 0
        self._lock = threading.RLock()

    def hydrate(self, seed: Optional[Iterable[Poll]] = None) -> None:
        """
        Load state from persistence. If nothing is stored and `seed` is given,
        the seed polls become the collection and are saved.
        """
        with self._lock:
            self._polls = self.persistence.load_polls()
            self._votes = self.persistence.load_votes()
            if not self._polls and seed is not None:
                self._polls = [p.model_copy(deep=True) for p in seed]
                self.persistence.save_polls(self._polls)
            self._last_created_at = max((p.created_at for p in self._polls), default=0)
            logger.info("hydrated %d polls, %d votes", len(self._polls), len(self._votes))

    # ---- reads ----

    @property
    def polls(self) -> List[Poll]:
        with self._lock:
            return [p.model_copy(deep=True) for p in self._polls]

    @property
    def votes(self) -> VoteLedger:
        with self._lock:
            return dict(self._votes)

    def get_poll(self, poll_id: str) -> Optional[Poll]:
        with self._lock:
            poll = self._find(poll_id)
            return poll.model_copy(deep=True) if poll else None

    def voted_for(self, poll_id: str) -> Optional[str]:
        with self._lock:
            return self._votes.get(poll_id)

    def has_voted(self, poll_id: str) -> bool:
        return self.voted_for(poll_id) is not None

    def _find(self, poll_id: str) -> Optional[Poll]:
        for p in self._polls:
            if p.id == poll_id:
                return p
        return None

    # ---- mutations ----

    def _next_created_at(self) -> int:
        # never earlier than a poll already created by this store
        self._last_created_at = max(self._last_created_at, self.clock())
        return self._last_created_at

    def create_poll(self, draft: PollDraft) -> Optional[Poll]:
        """
        Returns the new poll, or None when the draft is rejected (blank
        question or fewer than 2 non-blank options). Rejection has no effects.
        """
        question = (draft.question or "").strip()
        texts = [t.strip() for t in draft.options if t and t.strip()]
        if not question or len(texts) < 2:
            logger.debug("rejected poll draft: question=%r, %d usable options", question, len(texts))
            return None

        with self._lock:
            poll = Poll(
                id=new_id(),
                question=question,
                description=_clean(draft.description),
                options=[Option(id=new_id(), text=t, votes=0) for t in texts],
                category=_clean(draft.category) or DEFAULT_CATEGORY,
                created_at=self._next_created_at(),
                image_url=_clean(draft.image_url),
            )
            self._polls.insert(0, poll)
            self.persistence.save_polls(self._polls)
            snapshot = poll.model_copy(deep=True)

        logger.info("created poll %s with %d options", poll.id, len(poll.options))
        self.runner.submit(self.remote.create_poll(snapshot))
        return snapshot

    def vote(self, poll_id: str, option_id: str) -> bool:
        """
        Records one vote. Returns False, changing nothing, if the poll was
        already voted on or the poll/option does not exist.
        """
        with self._lock:
            if poll_id in self._votes:
                return False
            poll = self._find(poll_id)
            option = poll.find_option(option_id) if poll else None
            if option is None:
                return False

            option.votes += 1
            self._votes[poll_id] = option_id
            self.persistence.save_polls(self._polls)
            self.persistence.save_votes(self._votes)

        logger.info("vote recorded on poll %s", poll_id)
        self.runner.submit(self.remote.vote(poll_id, option_id))
        return True

    def delete_poll(self, poll_id: str) -> bool:
        with self._lock:
            poll = self._find(poll_id)
            if poll is None:
                return False
            self._polls = [p for p in self._polls if p.id != poll_id]
            self._votes.pop(poll_id, None)
            self.persistence.save_polls(self._polls)
            self.persistence.save_votes(self._votes)

        logger.info("deleted poll %s", poll_id)
        return True
