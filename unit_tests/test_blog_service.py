import pytest
from fastapi import HTTPException

from models import Blog
from services.blog_service import BlogService
import crud


@pytest.fixture
def blog_service(db_session, media_client):
    return BlogService(db_session, media_client)


def add_blog(db_session, user_id, title="A title", n=0):
    return crud.insert(db_session, Blog(
        title=title,
        description="Some text",
        image_url=f"https://i.imgur.com/seed{n}.png",
        image_delete_hash=f"seedhash{n}",
        user_id=user_id,
    ))


def test_create_blog(blog_service, user, upload_file, media_client):
    blog = blog_service.create_blog("Alps", "Three days hiking", user.id, upload_file())

    assert blog.title == "Alps"
    assert blog.user_id == user.id
    assert blog.image_url == "https://i.imgur.com/img1.png"
    assert blog.first_name == "Jane"
    assert blog.last_name == "Doe"
    assert blog.created_at is not None
    assert len(media_client.uploads) == 1


def test_create_blog_upload_failure_writes_nothing(blog_service, user, upload_file, media_client, db_session):
    media_client.fail_upload = True
    with pytest.raises(HTTPException) as exc:
        blog_service.create_blog("Alps", "Text", user.id, upload_file())
    assert exc.value.status_code == 400
    assert crud.count(db_session, Blog) == 0


def test_create_blog_unknown_user(blog_service, upload_file, media_client):
    with pytest.raises(HTTPException) as exc:
        blog_service.create_blog("Alps", "Text", "missing", upload_file())
    assert exc.value.status_code == 404
    assert media_client.uploads == []


def test_get_blog_with_missing_owner_has_empty_names(blog_service, db_session):
    blog = add_blog(db_session, "ghost")
    out = blog_service.get_blog(blog.id)
    assert out.first_name == ""
    assert out.last_name == ""


def test_get_blog_not_found(blog_service):
    with pytest.raises(HTTPException) as exc:
        blog_service.get_blog("missing")
    assert exc.value.status_code == 404


def test_list_blogs_second_page(blog_service, db_session, user):
    blogs = [add_blog(db_session, user.id, title=f"Blog {i}", n=i) for i in range(1, 13)]

    page = blog_service.list_blogs(page=2, page_size=5)
    assert page.total_count == 12
    assert page.total_pages == 3
    assert [b.id for b in page.blogs] == [b.id for b in blogs[5:10]]
    assert all(b.first_name == "Jane" for b in page.blogs)


def test_list_blogs_resolves_names_in_one_lookup(blog_service, db_session, make_user, monkeypatch):
    first, second = make_user(first_name="One"), make_user(first_name="Two")
    for i in range(4):
        add_blog(db_session, first.id if i % 2 else second.id, n=i)

    calls = []
    original = crud.user_names

    def counting_user_names(db, user_ids):
        calls.append(set(user_ids))
        return original(db, user_ids)

    monkeypatch.setattr(crud, "user_names", counting_user_names)
    page = blog_service.list_blogs(page=1, page_size=10)

    assert calls == [{first.id, second.id}]
    assert {b.first_name for b in page.blogs} == {"One", "Two"}


def test_list_user_blogs_empty_is_not_found(blog_service, user):
    with pytest.raises(HTTPException) as exc:
        blog_service.list_user_blogs(user.id, page=1, page_size=10)
    assert exc.value.status_code == 404


def test_list_user_blogs(blog_service, db_session, user, make_user):
    other = make_user()
    add_blog(db_session, user.id, n=1)
    add_blog(db_session, other.id, n=2)

    page = blog_service.list_user_blogs(user.id, page=1, page_size=10)
    assert page.total_count == 1
    assert page.blogs[0].user_id == user.id


def test_update_blog_without_image_keeps_image(blog_service, db_session, user, media_client):
    blog = add_blog(db_session, user.id, title="Old")
    out = blog_service.update_blog(blog.id, title="New")

    assert out.title == "New"
    assert out.description == "Some text"
    assert out.image_url == "https://i.imgur.com/seed0.png"
    assert crud.find_by_id(db_session, Blog, blog.id).image_delete_hash == "seedhash0"
    assert media_client.uploads == [] and media_client.deletes == []


def test_update_blog_with_image_deletes_then_uploads(blog_service, db_session, user, upload_file, media_client):
    blog = add_blog(db_session, user.id)
    out = blog_service.update_blog(blog.id, image=upload_file())

    assert media_client.deletes == ["seedhash0"]
    assert len(media_client.uploads) == 1
    assert out.image_url == "https://i.imgur.com/img1.png"
    assert crud.find_by_id(db_session, Blog, blog.id).image_delete_hash == "delhash1"


def test_update_blog_aborts_when_old_image_delete_fails(blog_service, db_session, user, upload_file, media_client):
    blog = add_blog(db_session, user.id, title="Old")
    media_client.fail_delete = True

    with pytest.raises(HTTPException) as exc:
        blog_service.update_blog(blog.id, title="New", image=upload_file())
    assert exc.value.status_code == 400

    stored = crud.find_by_id(db_session, Blog, blog.id)
    assert stored.title == "Old"
    assert stored.image_delete_hash == "seedhash0"
    assert media_client.uploads == []


def test_update_blog_not_found(blog_service):
    with pytest.raises(HTTPException) as exc:
        blog_service.update_blog("missing", title="x")
    assert exc.value.status_code == 404


def test_delete_blog(blog_service, db_session, user, media_client):
    blog = add_blog(db_session, user.id)
    blog_id = blog.id
    blog_service.delete_blog(blog_id)

    assert media_client.deletes == ["seedhash0"]
    assert crud.find_by_id(db_session, Blog, blog_id) is None


def test_delete_blog_kept_when_image_delete_fails(blog_service, db_session, user, media_client):
    blog = add_blog(db_session, user.id)
    media_client.fail_delete = True

    with pytest.raises(HTTPException) as exc:
        blog_service.delete_blog(blog.id)
    assert exc.value.status_code == 400
    assert crud.find_by_id(db_session, Blog, blog.id) is not None


def test_search_unions_title_and_author_matches(blog_service, db_session, make_user):
    alice = make_user(first_name="Alice", last_name="Alpine")
    bob = make_user(first_name="Bob", last_name="Brown")
    by_title = add_blog(db_session, bob.id, title="Alpine lakes", n=1)
    by_both = add_blog(db_session, alice.id, title="Alpine passes", n=2)
    by_author = add_blog(db_session, alice.id, title="City walks", n=3)
    add_blog(db_session, bob.id, title="Deserts", n=4)

    page = blog_service.search_blogs("  alpine ", page=1, page_size=10)

    assert [b.id for b in page.blogs] == [by_title.id, by_both.id, by_author.id]
    # two title matches plus one matching user
    assert page.total_count == 3
    assert page.blogs[0].first_name == "Bob"


def test_search_total_is_sum_of_both_counts(blog_service, db_session, make_user):
    alice = make_user(first_name="Alice", last_name="Alpine")
    add_blog(db_session, alice.id, title="Alpine passes", n=1)

    page = blog_service.search_blogs("alpine", page=1, page_size=10)
    assert len(page.blogs) == 1
    assert page.total_count == 2


def test_search_empty_query(blog_service):
    with pytest.raises(HTTPException) as exc:
        blog_service.search_blogs("   ", page=1, page_size=10)
    assert exc.value.status_code == 400


def test_search_treats_wildcards_literally(blog_service, db_session, user):
    add_blog(db_session, user.id, title="Alps", n=1)
    percent = add_blog(db_session, user.id, title="100% uphill", n=2)

    page = blog_service.search_blogs("%", page=1, page_size=10)
    assert [b.id for b in page.blogs] == [percent.id]
    assert page.total_count == 1

    page = blog_service.search_blogs("_", page=1, page_size=10)
    assert page.blogs == []
    assert page.total_count == 0
