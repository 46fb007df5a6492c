"""Social feed API tests."""

from datetime import UTC, datetime, timedelta

from src.models.post import Post


def create_post(client, headers, content="Hello campus"):
    response = client.post("/api/v1/posts", headers=headers, json={"content": content})
    assert response.status_code == 201
    return response.json()


def test_feed_requires_auth(client):
    assert client.get("/api/v1/posts").status_code == 401


def test_create_post(client, auth_headers):
    response = client.post(
        "/api/v1/posts",
        headers=auth_headers,
        json={"content": "First post", "images": ["https://example.com/a.png"]},
    )
    assert response.status_code == 201
    data = response.json()
    assert data["content"] == "First post"
    assert data["images"] == ["https://example.com/a.png"]
    assert data["user"]["id"] == auth_headers.user_id
    assert data["counts"] == {"likes": 0, "comments": 0, "reposts": 0}
    assert data["isLikedByUser"] is False


def test_post_validation(client, auth_headers):
    assert client.post("/api/v1/posts", headers=auth_headers, json={"content": ""}).status_code == 400
    response = client.post(
        "/api/v1/posts",
        headers=auth_headers,
        json={"content": "pics", "images": [f"https://example.com/{i}.png" for i in range(5)]},
    )
    assert response.status_code == 400


def test_feed_cursor_pagination(client, auth_headers):
    ids = [create_post(client, auth_headers, f"post {i}")["id"] for i in range(5)]

    page = client.get("/api/v1/posts", headers=auth_headers, params={"limit": 2}).json()
    assert [post["id"] for post in page["posts"]] == [ids[4], ids[3]]
    assert page["hasMore"] is True
    assert page["nextCursor"] == ids[3]

    page = client.get(
        "/api/v1/posts", headers=auth_headers, params={"limit": 2, "cursor": page["nextCursor"]}
    ).json()
    assert [post["id"] for post in page["posts"]] == [ids[2], ids[1]]

    page = client.get(
        "/api/v1/posts", headers=auth_headers, params={"limit": 2, "cursor": page["nextCursor"]}
    ).json()
    assert [post["id"] for post in page["posts"]] == [ids[0]]
    assert page["hasMore"] is False
    assert page["nextCursor"] is None


def test_user_posts(client, auth_headers, other_headers):
    create_post(client, auth_headers, "mine")
    create_post(client, other_headers, "theirs")

    page = client.get(f"/api/v1/posts/user/{other_headers.user_id}", headers=auth_headers).json()
    assert [post["content"] for post in page["posts"]] == ["theirs"]


def test_delete_post_owner_only(client, auth_headers, other_headers):
    post = create_post(client, auth_headers)
    assert client.delete(f"/api/v1/posts/{post['id']}", headers=other_headers).status_code == 403
    assert client.delete(f"/api/v1/posts/{post['id']}", headers=auth_headers).status_code == 200
    assert client.get(f"/api/v1/posts/{post['id']}", headers=auth_headers).status_code == 404


def test_like_and_unlike(client, auth_headers, other_headers):
    post = create_post(client, auth_headers)
    url = f"/api/v1/posts/{post['id']}/like"

    response = client.post(url, headers=other_headers)
    assert response.json() == {"liked": True, "likeCount": 1}
    assert client.post(url, headers=other_headers).status_code == 409

    seen_by_liker = client.get(f"/api/v1/posts/{post['id']}", headers=other_headers).json()
    assert seen_by_liker["isLikedByUser"] is True
    assert seen_by_liker["counts"]["likes"] == 1
    seen_by_author = client.get(f"/api/v1/posts/{post['id']}", headers=auth_headers).json()
    assert seen_by_author["isLikedByUser"] is False

    response = client.delete(url, headers=other_headers)
    assert response.json() == {"liked": False, "likeCount": 0}
    assert client.delete(url, headers=other_headers).status_code == 400


def test_like_missing_post(client, auth_headers):
    assert client.post("/api/v1/posts/99999/like", headers=auth_headers).status_code == 404


def test_comments(client, auth_headers, other_headers):
    post = create_post(client, auth_headers)
    url = f"/api/v1/posts/{post['id']}/comments"

    first = client.post(url, headers=other_headers, json={"content": "Nice"})
    assert first.status_code == 201
    assert first.json()["user"]["id"] == other_headers.user_id
    client.post(url, headers=auth_headers, json={"content": "Thanks"})

    page = client.get(url, headers=auth_headers, params={"limit": 1}).json()
    assert [comment["content"] for comment in page["comments"]] == ["Thanks"]
    assert page["hasMore"] is True

    page = client.get(url, headers=auth_headers, params={"cursor": page["nextCursor"]}).json()
    assert [comment["content"] for comment in page["comments"]] == ["Nice"]

    counts = client.get(f"/api/v1/posts/{post['id']}", headers=auth_headers).json()["counts"]
    assert counts["comments"] == 2

    comment_id = first.json()["id"]
    assert client.delete(f"/api/v1/posts/comments/{comment_id}", headers=auth_headers).status_code == 403
    assert client.delete(f"/api/v1/posts/comments/{comment_id}", headers=other_headers).status_code == 200
    assert client.delete(f"/api/v1/posts/comments/{comment_id}", headers=other_headers).status_code == 404


def test_comment_validation(client, auth_headers):
    post = create_post(client, auth_headers)
    response = client.post(
        f"/api/v1/posts/{post['id']}/comments", headers=auth_headers, json={"content": "x" * 301}
    )
    assert response.status_code == 400


def test_repost_and_undo(client, auth_headers, other_headers):
    post = create_post(client, auth_headers, "Original thought")
    url = f"/api/v1/posts/{post['id']}/repost"

    response = client.post(url, headers=other_headers, json={"repostComment": "So true"})
    assert response.status_code == 201
    repost = response.json()
    assert repost["isRepost"] is True
    assert repost["content"] == "Original thought"
    assert repost["repostComment"] == "So true"
    assert repost["originalPost"]["id"] == post["id"]
    assert repost["originalPost"]["user"]["id"] == auth_headers.user_id

    assert client.post(url, headers=other_headers).status_code == 409
    counts = client.get(f"/api/v1/posts/{post['id']}", headers=auth_headers).json()["counts"]
    assert counts["reposts"] == 1

    assert client.delete(url, headers=other_headers).status_code == 200
    assert client.delete(url, headers=other_headers).status_code == 400
    assert client.get(f"/api/v1/posts/{repost['id']}", headers=auth_headers).status_code == 404


def test_repost_without_body(client, auth_headers, other_headers):
    post = create_post(client, auth_headers)
    response = client.post(f"/api/v1/posts/{post['id']}/repost", headers=other_headers)
    assert response.status_code == 201
    assert response.json()["repostComment"] is None


def test_pagination_ignores_timestamp_order(client, db, auth_headers):
    """Every post appears exactly once even when timestamps disagree with ids."""
    ids = [create_post(client, auth_headers, f"post {i}")["id"] for i in range(4)]
    newest = db.query(Post).filter(Post.id == ids[-1]).one()
    newest.created_at = datetime.now(UTC) - timedelta(days=1)
    db.commit()

    seen = []
    cursor = None
    while True:
        params = {"limit": 1} if cursor is None else {"limit": 1, "cursor": cursor}
        page = client.get("/api/v1/posts", headers=auth_headers, params=params).json()
        seen.extend(post["id"] for post in page["posts"])
        if not page["hasMore"]:
            break
        cursor = page["nextCursor"]

    assert seen == list(reversed(ids))
