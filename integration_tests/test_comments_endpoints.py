import pytest

from models import Blog
import crud


@pytest.fixture
def blog(db_session, user):
    return crud.insert(db_session, Blog(
        title="Alps",
        description="Text",
        image_url="https://i.imgur.com/a.png",
        image_delete_hash="hash-a",
        user_id=user.id,
    ))


def test_create_and_get_comment(client, user, blog, auth_headers):
    headers = auth_headers(user)
    response = client.post("/api/comments", json={"blog_id": blog.id, "user_id": user.id, "content": "Nice"},
                           headers=headers)
    assert response.status_code == 201
    comment = response.json()

    response = client.get(f"/api/comments/{comment['id']}", headers=headers)
    assert response.status_code == 200
    assert response.json()["content"] == "Nice"


def test_comment_on_unknown_blog(client, user, auth_headers):
    headers = auth_headers(user)
    response = client.post("/api/comments", json={"blog_id": "missing", "user_id": user.id, "content": "Nice"},
                           headers=headers)
    assert response.status_code == 404
    assert client.get("/api/comments", headers=headers).json()["TotalCount"] == 0


def test_list_by_blog_and_user(client, user, blog, auth_headers):
    headers = auth_headers(user)
    for i in range(3):
        client.post("/api/comments", json={"blog_id": blog.id, "user_id": user.id, "content": f"c{i}"},
                    headers=headers)

    by_blog = client.get(f"/api/comments/blog/{blog.id}", params={"pageSize": 2}, headers=headers).json()
    assert by_blog["TotalCount"] == 3
    assert by_blog["TotalPages"] == 2
    assert len(by_blog["Comments"]) == 2

    by_user = client.get(f"/api/comments/user/{user.id}", headers=headers).json()
    assert by_user["TotalCount"] == 3

    assert client.get("/api/comments/user/missing", headers=headers).status_code == 404


def test_update_keeps_created_at(client, user, blog, auth_headers):
    headers = auth_headers(user)
    comment = client.post("/api/comments", json={"blog_id": blog.id, "user_id": user.id, "content": "First"},
                          headers=headers).json()

    response = client.put(f"/api/comments/{comment['id']}",
                          json={"blog_id": blog.id, "user_id": user.id, "content": "Edited"}, headers=headers)
    assert response.status_code == 200
    assert response.json()["content"] == "Edited"
    assert response.json()["created_at"] == comment["created_at"]


def test_only_author_or_admin_can_delete(client, user, admin, make_user, blog, auth_headers):
    comment = client.post("/api/comments", json={"blog_id": blog.id, "user_id": user.id, "content": "Mine"},
                          headers=auth_headers(user)).json()

    assert client.delete(f"/api/comments/{comment['id']}", headers=auth_headers(make_user())).status_code == 403
    assert client.delete(f"/api/comments/{comment['id']}", headers=auth_headers(admin)).status_code == 204
    assert client.delete(f"/api/comments/{comment['id']}", headers=auth_headers(admin)).status_code == 404


def test_user_cannot_comment_as_someone_else(client, user, admin, blog, auth_headers):
    admin_id = admin.id
    response = client.post("/api/comments", json={"blog_id": blog.id, "user_id": admin_id, "content": "Forged"},
                           headers=auth_headers(user))
    assert response.status_code == 403
    assert client.get(f"/api/comments/user/{admin_id}", headers=auth_headers(user)).json()["TotalCount"] == 0


def test_author_cannot_move_comment_to_someone_else(client, user, admin, blog, auth_headers):
    headers = auth_headers(user)
    comment = client.post("/api/comments", json={"blog_id": blog.id, "user_id": user.id, "content": "Mine"},
                          headers=headers).json()

    response = client.put(f"/api/comments/{comment['id']}",
                          json={"blog_id": blog.id, "user_id": admin.id, "content": "Mine"}, headers=headers)
    assert response.status_code == 403
    assert client.get(f"/api/comments/{comment['id']}", headers=headers).json()["user_id"] == user.id


def test_admin_can_comment_for_a_user(client, user, admin, blog, auth_headers):
    response = client.post("/api/comments", json={"blog_id": blog.id, "user_id": user.id, "content": "Moderated"},
                           headers=auth_headers(admin))
    assert response.status_code == 201
    assert response.json()["user_id"] == user.id
