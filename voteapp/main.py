import logging
from contextlib import asynccontextmanager
from typing import List, Optional

from fastapi import Depends, FastAPI, HTTPException, Request

from .config import ALL_CATEGORIES, API_TIMEOUT, API_URL, DATA_DIR, LOG_LEVEL, PORT, SEED_DEMO
from .demo import demo_polls
from .models import OptionResult, Poll, PollDraft, PollView, VoteIn
from .persistence import FileKeyValueStore, Persistence
from .remote import BackgroundRunner, RemoteSyncClient
from .results import ranked_results, time_ago
from .state import PollStore
from .views import categories, filter_polls

logger = logging.getLogger(__name__)


def build_store() -> PollStore:
    store = PollStore(
        persistence=Persistence(FileKeyValueStore(DATA_DIR)),
        remote=RemoteSyncClient(API_URL, timeout=API_TIMEOUT),
        runner=BackgroundRunner(),
    )
    store.hydrate(seed=demo_polls() if SEED_DEMO else None)
    return store


def create_app(store: Optional[PollStore] = None) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        app.state.store = store or build_store()
        if not app.state.store.remote.enabled:
            logger.info("no remote endpoint configured, running local only")
        yield
        app.state.store.runner.close()

    app = FastAPI(title="VoteApp", lifespan=lifespan)

    def get_store(request: Request) -> PollStore:
        return request.app.state.store

    def get_existing_poll(poll_id: str, store: PollStore = Depends(get_store)) -> Poll:
        poll = store.get_poll(poll_id)
        if poll is None:
            raise HTTPException(status_code=404, detail="Poll not found")
        return poll

    @app.get("/polls", response_model=List[PollView])
    def list_polls(category: str = ALL_CATEGORIES, q: str = "", store: PollStore = Depends(get_store)):
        votes = store.votes
        return [
            PollView(**p.model_dump(), voted_for=votes.get(p.id), age=time_ago(p.created_at))
            for p in filter_polls(store.polls, category, q)
        ]

    @app.get("/categories")
    def list_categories(store: PollStore = Depends(get_store)) -> List[str]:
        return categories(store.polls)

    @app.post("/polls", response_model=Poll, status_code=201)
    def create_poll(draft: PollDraft, store: PollStore = Depends(get_store)):
        poll = store.create_poll(draft)
        if poll is None:
            raise HTTPException(
                status_code=422,
                detail="A poll needs a question and at least 2 non-empty options",
            )
        return poll

    @app.post("/polls/{poll_id}/votes")
    def vote(
        v: VoteIn,
        poll: Poll = Depends(get_existing_poll),
        store: PollStore = Depends(get_store),
    ):
        recorded = store.vote(poll.id, v.option_id)
        return {"ok": True, "recorded": recorded, "votedFor": store.voted_for(poll.id)}

    @app.get("/polls/{poll_id}/results", response_model=List[OptionResult])
    def results(poll: Poll = Depends(get_existing_poll), store: PollStore = Depends(get_store)):
        # results stay hidden until this installation has voted
        if not store.has_voted(poll.id):
            raise HTTPException(status_code=403, detail="Vote first to see results")
        return ranked_results(poll)

    @app.delete("/polls/{poll_id}")
    def delete_poll(poll_id: str, store: PollStore = Depends(get_store)):
        return {"ok": True, "deleted": store.delete_poll(poll_id)}

    return app


logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("voteapp.main:app", host="0.0.0.0", port=PORT, log_level=LOG_LEVEL.lower())
