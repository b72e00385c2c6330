"""End-to-end article flows through the HTTP API and the SQL repositories."""

import pytest

TOPICS = "/api/v1/topics"
ARTICLES = "/api/v1/articles"


async def _topic(client, who, name="Databases", parent_id=None) -> dict:
    response = await client.post(TOPICS, json={"name": name, "parent_id": parent_id}, headers=who.headers)
    assert response.status_code == 201, response.text
    return response.json()


async def _article(client, who, *, topic_id=None, parent_id=None, title="Post", publish=True) -> dict:
    payload = {"title": title, "content": f"{title} body", "topic_id": topic_id, "parent_id": parent_id}
    response = await client.post(ARTICLES, json=payload, headers=who.headers)
    assert response.status_code == 201, response.text
    article = response.json()
    if publish:
        response = await client.post(f"{ARTICLES}/{article['id']}/publish", headers=who.headers)
        assert response.status_code == 200, response.text
        article = response.json()
    return article


@pytest.mark.asyncio
async def test_thread_creation_and_reads(client, people):
    editor = people["editor"]
    topic = await _topic(client, editor)
    root = await _article(client, editor, topic_id=topic["id"], title="Question")
    reply = await _article(client, editor, parent_id=root["id"], title="Answer")

    assert reply["ancestors"] == [root["id"]]
    assert reply["topic_id"] == topic["id"]

    roots = (await client.get(ARTICLES)).json()
    assert [a["id"] for a in roots] == [root["id"]]

    replies = (await client.get(ARTICLES, params={"parent_id": root["id"]})).json()
    assert [a["id"] for a in replies] == [reply["id"]]


@pytest.mark.asyncio
async def test_anonymous_cannot_write(client, people):
    response = await client.post(TOPICS, json={"name": "Nope"})
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_pending_account_is_forbidden(client, people):
    response = await client.post(TOPICS, json={"name": "Nope"}, headers=people["pending"].headers)
    assert response.status_code == 403
    assert response.json()["detail"]["code"] == "forbidden"


@pytest.mark.asyncio
async def test_garbage_token_is_unauthorized(client, people):
    response = await client.get(ARTICLES, headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_guarded_edit_and_revision_history(client, people):
    editor = people["editor"]
    topic = await _topic(client, editor)
    article = await _article(client, editor, topic_id=topic["id"], title="v1")

    first = await client.patch(
        f"{ARTICLES}/{article['id']}", json={"title": "v2", "version": 1}, headers=editor.headers
    )
    assert first.status_code == 200
    assert first.json()["version"] == 2

    stale = await client.patch(
        f"{ARTICLES}/{article['id']}", json={"title": "lost", "version": 1}, headers=editor.headers
    )
    assert stale.status_code == 409
    assert stale.json()["detail"]["current_version"] == 2

    detail = (await client.get(f"{ARTICLES}/{article['id']}")).json()
    assert detail["article"]["title"] == "v2"
    assert [r["version"] for r in detail["revisions"]] == [1]
    assert detail["revisions"][0]["title"] == "v1"
    assert detail["revisions"][0]["updated_by"] == {"id": editor.id, "name": "Edith Editor"}


@pytest.mark.asyncio
async def test_edit_without_version_is_bad_request(client, people):
    editor = people["editor"]
    topic = await _topic(client, editor)
    article = await _article(client, editor, topic_id=topic["id"])

    response = await client.patch(f"{ARTICLES}/{article['id']}", json={"title": "x"}, headers=editor.headers)

    assert response.status_code == 400
    assert response.json()["detail"]["code"] == "invalid_argument"


@pytest.mark.asyncio
async def test_malformed_id_is_bad_request(client, people):
    response = await client.get(f"{ARTICLES}/not-a-uuid")
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_move_rewrites_descendants_in_storage(client, people):
    editor = people["editor"]
    topic = await _topic(client, editor)
    a = await _article(client, editor, topic_id=topic["id"], title="A")
    x = await _article(client, editor, parent_id=a["id"], title="X")
    y = await _article(client, editor, parent_id=x["id"], title="Y")
    b = await _article(client, editor, topic_id=topic["id"], title="B")

    moved = await client.patch(
        f"{ARTICLES}/{x['id']}", json={"parent_id": b["id"], "version": 1}, headers=editor.headers
    )
    assert moved.status_code == 200

    y_now = (await client.get(f"{ARTICLES}/{y['id']}")).json()["article"]
    assert y_now["ancestors"] == [b["id"], x["id"]]

    cycle = await client.patch(
        f"{ARTICLES}/{b['id']}", json={"parent_id": y["id"], "version": 1}, headers=editor.headers
    )
    assert cycle.status_code == 400
    assert cycle.json()["detail"]["code"] == "cycle_detected"


@pytest.mark.asyncio
async def test_delete_restore_and_purge_lifecycle(client, people):
    editor, admin = people["editor"], people["admin"]
    topic = await _topic(client, editor)
    root = await _article(client, editor, topic_id=topic["id"], title="Root")
    reply = await _article(client, editor, parent_id=root["id"], title="Reply")

    forbidden = await client.delete(f"{ARTICLES}/{root['id']}", headers=editor.headers)
    assert forbidden.status_code == 403

    deleted = await client.delete(f"{ARTICLES}/{root['id']}", headers=admin.headers)
    assert deleted.json() == {"deleted_count": 2}

    assert (await client.get(f"{ARTICLES}/{reply['id']}")).status_code == 404
    hidden = (await client.get(f"{ARTICLES}/{reply['id']}", headers=admin.headers)).json()["article"]
    assert hidden["deleted"] is True
    assert hidden["published"] is False

    forest = (await client.get(f"{ARTICLES}/deleted", headers=admin.headers)).json()
    assert [n["id"] for n in forest] == [root["id"]]
    assert [c["id"] for c in forest[0]["children"]] == [reply["id"]]

    restored = await client.post(
        f"{ARTICLES}/{reply['id']}/undelete", params={"restore_children": "false"}, headers=admin.headers
    )
    assert restored.status_code == 200
    assert restored.json()["published"] is True
    root_now = (await client.get(f"{ARTICLES}/{root['id']}")).json()["article"]
    assert root_now["deleted"] is False

    live_purge = await client.delete(f"{ARTICLES}/{reply['id']}/permanent", headers=admin.headers)
    assert live_purge.status_code == 400

    await client.delete(f"{ARTICLES}/{reply['id']}", headers=admin.headers)
    purge = await client.delete(f"{ARTICLES}/{reply['id']}/permanent", headers=admin.headers)
    assert purge.status_code == 200
    assert (await client.get(f"{ARTICLES}/{reply['id']}", headers=admin.headers)).status_code == 404


@pytest.mark.asyncio
async def test_drafts_duplicate_and_unpublish(client, people):
    editor, other = people["editor"], people["other"]
    topic = await _topic(client, editor)
    draft = await _article(client, editor, topic_id=topic["id"], title="Draft", publish=False)

    mine = (await client.get(f"{ARTICLES}/drafts/my", headers=editor.headers)).json()
    assert [d["id"] for d in mine] == [draft["id"]]
    assert (await client.get(f"{ARTICLES}/{draft['id']}", headers=other.headers)).status_code == 404

    published = (await client.post(f"{ARTICLES}/{draft['id']}/publish", headers=editor.headers)).json()
    copy = await client.post(f"{ARTICLES}/{published['id']}/duplicate-draft", headers=editor.headers)
    assert copy.status_code == 201
    assert copy.json()["title"] == "Copy of Draft"
    assert copy.json()["published"] is False

    unpublished = await client.post(f"{ARTICLES}/{published['id']}/unpublish", headers=editor.headers)
    assert unpublished.status_code == 200
    assert unpublished.json()["published"] is False

    removed = await client.delete(f"{ARTICLES}/{copy.json()['id']}/draft", headers=editor.headers)
    assert removed.status_code == 204


@pytest.mark.asyncio
async def test_guest_reads_can_be_disabled(client, people, guest_reads_disabled):
    assert (await client.get(ARTICLES)).status_code == 401
    assert (await client.get(ARTICLES, headers=people["pending"].headers)).status_code == 403
    assert (await client.get(ARTICLES, headers=people["editor"].headers)).status_code == 200
