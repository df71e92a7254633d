from __future__ import annotations
import httpx
import pytest
from httpx import AsyncClient
from dailydraw import keys
from dailydraw.config import settings
from dailydraw.routes.scheduler import get_queue
from conftest import DAY, MODERATOR, PNG, auth


def _client(app) -> AsyncClient:
    return AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://test")


@pytest.mark.asyncio
async def test_submit_vote_and_leaderboard(wired):
    async with _client(wired) as ac:
        r = await ac.post("/api/submit", json={"image_base64": PNG})
        assert r.status_code == 401
        assert r.json() == {"status": "error", "code": "unauthenticated", "message": "You must be logged in"}

        r = await ac.post("/api/submit", headers=auth("alice"), json={"image_base64": PNG})
        assert r.status_code == 200, r.text
        sid = r.json()["submission_id"]

        r = await ac.post("/api/submit", headers=auth("alice"), json={"image_base64": PNG})
        assert r.status_code == 409
        assert r.json()["code"] == "already_submitted_today"

        r = await ac.post("/api/vote", headers=auth("alice"), json={"submission_id": sid})
        assert r.status_code == 400 and r.json()["code"] == "self_vote"

        r = await ac.post("/api/vote", headers=auth("bob"), json={"submission_id": sid})
        assert r.json() == {"status": "ok", "vote_count": 1}
        r = await ac.post("/api/vote", headers=auth("bob"), json={"submission_id": sid})
        assert r.status_code == 409 and r.json()["code"] == "already_voted"

        r = await ac.post("/api/vote", headers=auth("bob"), json={"submission_id": "s999"})
        assert r.status_code == 404

        body = (await ac.get("/api/submissions", headers=auth("bob"))).json()
        assert body["date"] == DAY
        assert [(s["id"], s["vote_count"], s["has_voted"]) for s in body["submissions"]] == [(sid, 1, True)]

        board = (await ac.get("/api/leaderboard")).json()
        assert board["entries"][0]["rank"] == 1
        assert board["entries"][0]["username"] == "alice"

        r = await ac.get("/api/leaderboard", params={"day": "yesterday"})
        assert r.status_code == 400 and r.json()["code"] == "invalid_day"


@pytest.mark.asyncio
async def test_oversized_image_is_413(wired, monkeypatch):
    monkeypatch.setattr(settings, "max_image_base64_length", 8)
    async with _client(wired) as ac:
        r = await ac.post("/api/submit", headers=auth("alice"), json={"image_base64": "A" * 9})
        assert r.status_code == 413
        assert r.json()["code"] == "payload_too_large"


@pytest.mark.asyncio
async def test_bad_token_and_bad_body(wired):
    async with _client(wired) as ac:
        r = await ac.post("/api/vote", headers={"Authorization": "Bearer nope"}, json={"submission_id": "s1"})
        assert r.status_code == 401
        r = await ac.post("/api/vote", headers=auth("bob"), json={})
        assert r.status_code == 422
        assert r.json()["status"] == "error" and r.json()["code"] == "invalid_request"


@pytest.mark.asyncio
async def test_prompt_ideas_flow(wired, store):
    async with _client(wired) as ac:
        r = await ac.post("/api/prompt/submit", headers=auth("alice"), json={"text": "abc"})
        assert r.status_code == 400 and r.json()["code"] == "too_short"

        r = await ac.post("/api/prompt/submit", headers=auth("alice"), json={"text": "Draw a cat"})
        p1 = r.json()["prompt_id"]
        r = await ac.post("/api/prompt/submit", headers=auth("bob"), json={"text": "Draw a dog"})
        p2 = r.json()["prompt_id"]
        r = await ac.post("/api/prompt/submit", headers=auth("bob"), json={"text": "Draw a fox"})
        assert r.status_code == 409

        for voter in ("carol", "dave"):
            r = await ac.post("/api/prompt/vote", headers=auth(voter), json={"prompt_id": p2})
            assert r.status_code == 200
        await ac.post("/api/prompt/vote", headers=auth("carol"), json={"prompt_id": p1})
        await store.increment(keys.user_wins("alice"), 3)

        listed = (await ac.get("/api/prompt/list", headers=auth("carol"))).json()["prompts"]
        assert [(p["id"], p["vote_count"], p["effective_score"], p["has_voted"]) for p in listed] == [
            (p1, 1, 4, True),
            (p2, 2, 2, True),
        ]

        init = (await ac.get("/api/init", headers=auth("alice"))).json()
        assert init["has_submitted_prompt_today"] is True
        assert init["profile"]["badge"] == "silver"
        assert init["is_moderator"] is False


@pytest.mark.asyncio
async def test_moderator_actions(wired, announcer):
    async with _client(wired) as ac:
        p1 = (await ac.post("/api/prompt/submit", headers=auth("alice"), json={"text": "Draw a cat"})).json()["prompt_id"]
        p2 = (await ac.post("/api/prompt/submit", headers=auth("bob"), json={"text": "Draw a dog"})).json()["prompt_id"]

        r = await ac.post("/api/prompt/admin/select", headers=auth("alice"), json={"prompt_id": p1})
        assert r.status_code == 403 and r.json()["code"] == "forbidden"
        r = await ac.post("/api/prompt/admin/select", json={"prompt_id": p1})
        assert r.status_code == 401

        r = await ac.post("/api/prompt/admin/select", headers=auth(MODERATOR), json={"prompt_id": "p404"})
        assert r.status_code == 404

        r = await ac.post("/api/prompt/admin/select", headers=auth(MODERATOR), json={"prompt_id": p1})
        assert r.json()["status"] == "ok"
        assert (await ac.get("/api/prompt/top")).json()["prompt"] == "Draw a cat"
        assert (await ac.get("/api/prompt")).json() == {"prompt": "Draw a cat", "date": DAY}

        r = await ac.post("/api/prompt/admin/reject", headers=auth(MODERATOR), json={"prompt_id": p2})
        assert r.status_code == 200
        rejected = (await ac.get(f"/api/prompt/{p2}")).json()
        assert rejected["status"] == "rejected"
        assert (await ac.get("/api/prompt/list")).json()["prompts"] == []

        r = await ac.post("/api/admin/prompt-override", headers=auth(MODERATOR), json={"prompt": "Draw the sea"})
        assert r.json()["message"] == "Prompt set to: Draw the sea"
        assert (await ac.get("/api/prompt")).json()["prompt"] == "Draw the sea"

        r = await ac.post("/api/admin/post", headers=auth(MODERATOR))
        post_id = r.json()["post_id"]
        assert announcer.posts[post_id] == "Daily Draw Challenge: Draw the sea"

        init = (await ac.get("/api/init", headers=auth(MODERATOR))).json()
        assert init["is_moderator"] is True


@pytest.mark.asyncio
async def test_profile_for_anonymous_and_winner(wired, store):
    await store.increment(keys.user_wins("alice"), 5)
    async with _client(wired) as ac:
        anon = (await ac.get("/api/profile")).json()["profile"]
        assert anon["username"] == "anonymous" and anon["badge"] == "none"
        me = (await ac.get("/api/profile", headers=auth("alice"))).json()["profile"]
        assert (me["win_count"], me["badge"], me["has_submitted_today"]) == (5, "gold", False)


@pytest.mark.asyncio
async def test_scheduler_rollover_endpoint(wired, store, announcer, monkeypatch):
    async with _client(wired) as ac:
        r = await ac.post("/internal/scheduler/daily-rollover")
        assert r.status_code == 200
        body = r.json()
        assert body["status"] == "ok" and body["opened_day"] == DAY
        assert body["post_id"] in announcer.posts

        winners = (await ac.get(f"/api/winners/{body['closed_day']}")).json()
        assert winners["closed"] is False

        monkeypatch.setattr(settings, "scheduler_token", "s3cret")
        r = await ac.post("/internal/scheduler/daily-rollover")
        assert r.status_code == 403
        r = await ac.post("/internal/scheduler/daily-rollover", headers={"X-Scheduler-Token": "s3cret"})
        assert r.status_code == 200


@pytest.mark.asyncio
async def test_scheduler_refuses_without_token_outside_dev(wired, monkeypatch):
    monkeypatch.setattr(settings, "environment", "prod")
    async with _client(wired) as ac:
        r = await ac.post("/internal/scheduler/daily-rollover")
        assert r.status_code == 403
        assert r.json()["message"] == "Scheduler token not configured"
        r = await ac.post("/internal/scheduler/daily-rollover/enqueue")
        assert r.status_code == 403


class _Job:
    id = "job-1"


class _Queue:
    def __init__(self):
        self.calls = []

    def enqueue(self, fn, **kwargs):
        self.calls.append((fn.__name__, kwargs))
        return _Job()


@pytest.mark.asyncio
async def test_scheduler_enqueue(wired):
    queue = _Queue()
    wired.dependency_overrides[get_queue] = lambda: queue
    async with _client(wired) as ac:
        r = await ac.post("/internal/scheduler/daily-rollover/enqueue")
    assert r.status_code == 202
    assert r.json() == {"status": "queued", "job_id": "job-1"}
    assert queue.calls == [("daily_rollover", {"job_timeout": 300})]
