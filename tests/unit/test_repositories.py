from datetime import datetime

from src.app.config import settings
from src.repositories.media_repo import MediaRepository
from src.repositories.user_repo import UserRepository


def test_get_page_orders_by_taken_then_uploaded(db_session, make_user, make_media):
    user = make_user()
    old = make_media(user, taken_at=datetime(2020, 1, 1))
    new_first = make_media(user, taken_at=datetime(2024, 1, 1), uploaded_at=datetime(2024, 2, 1))
    new_second = make_media(user, taken_at=datetime(2024, 1, 1), uploaded_at=datetime(2024, 3, 1))

    items, total, page, page_size = MediaRepository(db_session).get_page(1, 10)

    assert [m.id for m in items] == [new_second.id, new_first.id, old.id]
    assert (total, page, page_size) == (3, 1, 10)


def test_get_page_slices(db_session, make_user, make_media):
    user = make_user()
    for day in range(1, 6):
        make_media(user, taken_at=datetime(2024, 1, day))

    items, total, page, page_size = MediaRepository(db_session).get_page(2, 2)

    assert total == 5
    assert [m.taken_at.day for m in items] == [3, 2]


def test_get_page_clamps_arguments(db_session):
    repo = MediaRepository(db_session)

    assert repo.get_page(0, 0)[2:] == (1, 1)
    assert repo.get_page(-3, 10_000)[2:] == (1, settings.MAX_PAGE_SIZE)
    assert repo.get_page(None, None)[2:] == (1, settings.DEFAULT_PAGE_SIZE)


def test_media_crud(db_session, make_user, make_media):
    user = make_user()
    media = make_media(user)
    repo = MediaRepository(db_session)

    assert repo.get_media_file(media.id).file_name == media.file_name
    assert repo.count_by_uploader(user.id) == 1
    assert repo.delete_media_file(media.id) is True
    assert repo.delete_media_file(media.id) is False
    assert repo.get_media_file(media.id) is None


def test_user_lookup_is_case_insensitive(db_session):
    repo = UserRepository(db_session)
    user = repo.create_user(email="Mixed.Case@Example.com", name="Mixed")

    assert user.email == "mixed.case@example.com"
    assert repo.get_by_email("MIXED.case@example.COM").id == user.id
    assert repo.get_by_email("") is None


def test_get_by_google_id(db_session, make_user):
    user = make_user(google_id="google-123")
    repo = UserRepository(db_session)

    assert repo.get_by_google_id("google-123").id == user.id
    assert repo.get_by_google_id("") is None


def test_list_with_media_counts(db_session, make_user, make_media):
    zed = make_user(email="zed@example.com", name="Zed")
    amy = make_user(email="amy@example.com", name="Amy")
    make_media(zed)
    make_media(zed)

    rows = UserRepository(db_session).list_with_media_counts()

    assert [(u.email, count) for u, count in rows] == [
        ("amy@example.com", 0),
        ("zed@example.com", 2),
    ]
    assert UserRepository(db_session).get_with_media_count(zed.id)[1] == 2
    assert UserRepository(db_session).get_with_media_count(9999) is None
    assert UserRepository(db_session).media_count(amy.id) == 0


def test_base_update(db_session, make_user):
    repo = UserRepository(db_session)
    first = make_user(email="a@example.com", name="Amy")

    updated = repo.update(first.id, {"name": "Renamed", "not_a_column": "ignored"})

    assert updated.name == "Renamed"
    assert repo.get(first.id).name == "Renamed"
    assert repo.update(9999, {"name": "x"}) is None
