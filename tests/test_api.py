"""Tests for the HTTP adapter over the poll store."""
import pytest
from fastapi.testclient import TestClient

from voteapp.main import create_app
from voteapp.models import PollDraft


@pytest.fixture
def client(store):
    with TestClient(create_app(store)) as c:
        yield c


@pytest.fixture
def created(client):
    resp = client.post(
        "/polls",
        json={"question": "Best editor?", "options": ["vim", "emacs", " "], "category": "Tech"},
    )
    assert resp.status_code == 201
    return resp.json()


@pytest.mark.api
class TestPollsApi:
    def test_create_poll(self, created):
        assert created["question"] == "Best editor?"
        assert [o["text"] for o in created["options"]] == ["vim", "emacs"]
        assert created["category"] == "Tech"
        assert "createdAt" in created

    def test_create_rejected(self, client, store):
        resp = client.post("/polls", json={"question": "Q", "options": ["only one"]})
        assert resp.status_code == 422
        assert store.polls == []

    def test_list_and_filter(self, client, store, created):
        store.create_poll(PollDraft(question="Who wins?", options=["a", "b"], category="Sports"))

        assert [p["question"] for p in client.get("/polls").json()] == ["Who wins?", "Best editor?"]
        assert [p["question"] for p in client.get("/polls", params={"category": "Tech"}).json()] == ["Best editor?"]
        assert [p["question"] for p in client.get("/polls", params={"q": "WINS"}).json()] == ["Who wins?"]
        # newest first, so the Sports poll is seen before the Tech one
        assert client.get("/categories").json() == ["All", "Sports", "Tech"]

    def test_vote_then_results(self, client, created):
        poll_id = created["id"]
        option_id = created["options"][1]["id"]

        assert client.get(f"/polls/{poll_id}/results").status_code == 403

        resp = client.post(f"/polls/{poll_id}/votes", json={"optionId": option_id})
        assert resp.json() == {"ok": True, "recorded": True, "votedFor": option_id}

        again = client.post(f"/polls/{poll_id}/votes", json={"optionId": created["options"][0]["id"]})
        assert again.json() == {"ok": True, "recorded": False, "votedFor": option_id}

        results = client.get(f"/polls/{poll_id}/results").json()
        assert results[0] == {"id": option_id, "text": "emacs", "votes": 1, "percentage": 100}

        listed = client.get("/polls").json()
        assert listed[0]["votedFor"] == option_id
        assert listed[0]["age"].endswith(" ago")

    def test_unknown_poll(self, client):
        assert client.post("/polls/nope/votes", json={"optionId": "x"}).status_code == 404
        assert client.get("/polls/nope/results").status_code == 404

    def test_delete(self, client, created):
        poll_id = created["id"]
        client.post(f"/polls/{poll_id}/votes", json={"optionId": created["options"][0]["id"]})

        assert client.delete(f"/polls/{poll_id}").json() == {"ok": True, "deleted": True}
        assert client.delete(f"/polls/{poll_id}").json() == {"ok": True, "deleted": False}
        assert client.get("/polls").json() == []
