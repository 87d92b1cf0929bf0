# durable key-value storage for the poll collection and the vote ledger
import logging
import os
import tempfile
from typing import Annotated, Dict, List, Optional, Protocol

from pydantic import AfterValidator, TypeAdapter, ValidationError

from .config import POLLS_KEY, VOTES_KEY
from .models import Poll, VoteLedger

logger = logging.getLogger(__name__)


def _unique_poll_ids(polls: List[Poll]) -> List[Poll]:
    ids = [p.id for p in polls]
    if len(set(ids)) != len(ids):
        raise ValueError("duplicate poll ids in collection")
    return polls


_polls_adapter = TypeAdapter(Annotated[List[Poll], AfterValidator(_unique_poll_ids)])
_votes_adapter = TypeAdapter(Dict[str, str])


class KeyValueStore(Protocol):
    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...


class MemoryKeyValueStore:
    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self.data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value


class FileKeyValueStore:
    """
    One UTF-8 file per key inside `directory`.
    Writes go through a temp file + os.replace, so a reader sees either the
    old value or the new one.
    """

    def __init__(self, directory: str):
        self.directory = directory

    def _path(self, key: str) -> str:
        return os.path.join(self.directory, f"{key}.json")

    def get(self, key: str) -> Optional[str]:
        try:
            with open(self._path(key), "r", encoding="utf-8") as f:
                return f.read()
        except FileNotFoundError:
            return None

    def set(self, key: str, value: str) -> None:
        os.makedirs(self.directory, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=self.directory, prefix=f".{key}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(value)
            os.replace(tmp, self._path(key))
        except BaseException:
            if os.path.exists(tmp):
                os.unlink(tmp)
            raise


class Persistence:
    """
    Loads/saves the poll collection and the vote ledger.

    Missing or corrupt values load as empty. The two keys are written
    independently: a crash between save_polls and save_votes can leave them
    out of sync, nothing here detects or repairs that.
    """

    def __init__(self, kv: KeyValueStore):
        self.kv = kv

    def _read(self, key: str) -> Optional[str]:
        try:
            return self.kv.get(key)
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("storage read failed for %s: %s", key, e)
            return None

    def load_polls(self) -> List[Poll]:
        raw = self._read(POLLS_KEY)
        if not raw:
            return []
        try:
            return _polls_adapter.validate_json(raw)
        except ValidationError as e:
            logger.warning("discarding unreadable poll collection (%d errors)", e.error_count())
            return []

    def _write(self, key: str, value: str) -> None:
        try:
            self.kv.set(key, value)
        except OSError as e:
            # memory stays authoritative; the next save rewrites the whole key
            logger.warning("storage write failed for %s: %s", key, e)

    def save_polls(self, polls: List[Poll]) -> None:
        self._write(POLLS_KEY, _polls_adapter.dump_json(polls, by_alias=True).decode("utf-8"))

    def load_votes(self) -> VoteLedger:
        raw = self._read(VOTES_KEY)
        if not raw:
            return {}
        try:
            return _votes_adapter.validate_json(raw)
        except ValidationError as e:
            logger.warning("discarding unreadable vote ledger (%d errors)", e.error_count())
            return {}

    def save_votes(self, ledger: VoteLedger) -> None:
        self._write(VOTES_KEY, _votes_adapter.dump_json(ledger).decode("utf-8"))
