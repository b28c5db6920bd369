import io
from datetime import datetime

import pytest
from PIL import ExifTags, Image

from src.models.media_file import MediaFile
from src.models.enums import MediaType


def jpeg_bytes(size=(800, 600), taken=None) -> bytes:
    buffer = io.BytesIO()
    kwargs = {}
    if taken:
        exif = Image.Exif()
        exif[ExifTags.Base.DateTime] = taken
        kwargs["exif"] = exif.tobytes()
    Image.new("RGB", size, color=(10, 160, 90)).save(buffer, "JPEG", **kwargs)
    return buffer.getvalue()


def upload(client, headers, filename="IMG_0001.jpg", content=None, content_type="image/jpeg"):
    content = jpeg_bytes() if content is None else content
    return client.post(
        "/api/media/upload",
        headers=headers,
        files={"file": (filename, content, content_type)},
    )


@pytest.mark.integration
def test_upload_image(client, db_session, storage, thumbnail_service, member, member_headers):
    response = upload(client, member_headers, content=jpeg_bytes(taken="2023:08:20 14:00:00"))

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["message"] == "File uploaded successfully"

    data = body["data"]
    assert data["originalFileName"] == "IMG_0001.jpg"
    assert data["contentType"] == "image/jpeg"
    assert data["takenAt"].startswith("2023-08-20T14:00:00")
    assert data["fileName"].endswith(".jpg")
    assert data["thumbnailPath"] == f"20230820/{data['fileName'][:-4]}.jpg"

    media = db_session.get(MediaFile, data["id"])
    assert media.file_path == f"20230820/{data['fileName']}"
    assert media.uploaded_by == member.id
    assert media.media_type == MediaType.image
    assert (media.width, media.height) == (800, 600)
    assert storage.file_exists(media.file_path)
    assert thumbnail_service.thumbnail_exists(media.thumbnail_path)


@pytest.mark.integration
def test_upload_without_exif_uses_upload_time(client, member_headers):
    before = datetime.utcnow().replace(microsecond=0)

    response = upload(client, member_headers)

    taken_at = datetime.fromisoformat(response.json()["data"]["takenAt"])
    assert taken_at >= before


@pytest.mark.integration
def test_upload_rejects_extension(client, member_headers):
    response = upload(client, member_headers, filename="notes.txt", content=b"hello", content_type="text/plain")

    assert response.status_code == 400
    assert response.json()["error"] == "INVALID_FILE_EXTENSION"


@pytest.mark.integration
def test_upload_rejects_empty_file(client, member_headers):
    response = upload(client, member_headers, content=b"")

    assert response.status_code == 400
    assert response.json()["error"] == "EMPTY_FILE"


@pytest.mark.integration
def test_upload_missing_file_field(client, member_headers):
    response = client.post("/api/media/upload", headers=member_headers)

    assert response.status_code == 400
    assert response.json()["error"] == "EMPTY_FILE"


@pytest.mark.integration
def test_upload_too_large(client, member_headers, mocker):
    mocker.patch("src.api.v1.endpoints.media.settings.MAX_FILE_SIZE_BYTES", 10)

    response = upload(client, member_headers)

    assert response.status_code == 400
    assert response.json()["error"] == "INVALID_FILE_SIZE"


@pytest.mark.integration
def test_upload_succeeds_when_thumbnail_fails(client, db_session, member_headers):
    response = upload(client, member_headers, filename="photo.heic", content=b"not decodable", content_type="image/heic")

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["thumbnailPath"] == ""
    assert db_session.get(MediaFile, data["id"]).content_type == "image/heic"


@pytest.mark.integration
def test_upload_storage_failure_returns_upload_error(client, db_session, storage, member_headers, mocker):
    from src.services.storage.local import StorageError

    mocker.patch.object(storage, "save_file", side_effect=StorageError("disk full"))

    response = upload(client, member_headers)

    assert response.status_code == 500
    assert response.json()["error"] == "UPLOAD_ERROR"
    assert db_session.query(MediaFile).count() == 0


@pytest.mark.integration
def test_upload_oversized_image_keeps_original_without_thumbnail(
    client, db_session, storage, thumbnail_service, member_headers
):
    buffer = io.BytesIO()
    Image.new("1", (15000, 15000)).save(buffer, "PNG")

    response = upload(client, member_headers, filename="huge.png", content=buffer.getvalue(), content_type="image/png")

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["thumbnailPath"] == ""
    media = db_session.get(MediaFile, data["id"])
    assert storage.file_exists(media.file_path)
    assert not any(p.is_file() for p in thumbnail_service.thumbnail_directory.rglob("*"))


@pytest.mark.integration
def test_upload_database_failure_leaves_no_files(
    client, db_session, storage, thumbnail_service, member_headers, mocker
):
    from sqlalchemy.exc import SQLAlchemyError
    from src.repositories.media_repo import MediaRepository

    mocker.patch.object(MediaRepository, "add_media_file", side_effect=SQLAlchemyError("db down"))

    response = upload(client, member_headers)

    assert response.status_code == 500
    assert response.json()["error"] == "UPLOAD_ERROR"
    assert db_session.query(MediaFile).count() == 0
    assert not any(p.is_file() for p in storage.base_directory.rglob("*"))
    assert not any(p.is_file() for p in thumbnail_service.thumbnail_directory.rglob("*"))


@pytest.mark.integration
def test_upload_requires_auth(client):
    assert upload(client, {}).status_code == 401


@pytest.mark.integration
def test_list_media_paged(client, member, member_headers, make_media):
    for day in range(1, 4):
        make_media(member, taken_at=datetime(2024, 5, day))

    response = client.get("/api/media?page=1&pageSize=2", headers=member_headers)

    assert response.status_code == 200
    page = response.json()["data"]
    assert page["totalCount"] == 3
    assert page["pageSize"] == 2
    assert page["totalPages"] == 2
    assert page["hasNextPage"] is True
    assert page["hasPreviousPage"] is False
    assert [item["takenAt"][:10] for item in page["items"]] == ["2024-05-03", "2024-05-02"]


@pytest.mark.integration
def test_list_media_clamps_paging(client, member_headers):
    response = client.get("/api/media?page=0&pageSize=1000", headers=member_headers)

    assert response.status_code == 200
    page = response.json()["data"]
    assert page["page"] == 1
    assert page["pageSize"] == 100
    assert page["items"] == []
    assert page["totalPages"] == 0


@pytest.mark.integration
def test_get_media(client, member, member_headers, make_media):
    media = make_media(member, camera_model="Pixel 8", latitude=48.1, longitude=11.5)

    response = client.get(f"/api/media/{media.id}", headers=member_headers)

    data = response.json()["data"]
    assert data["id"] == media.id
    assert data["mediaType"] == "image"
    assert data["uploadedBy"] == member.id
    assert data["cameraModel"] == "Pixel 8"
    assert data["latitude"] == 48.1


@pytest.mark.integration
def test_get_media_not_found(client, member_headers):
    response = client.get("/api/media/999", headers=member_headers)

    assert response.status_code == 404
    assert response.json()["error"] == "FILE_NOT_FOUND"


@pytest.mark.integration
def test_download_content(client, member_headers):
    content = jpeg_bytes()
    media_id = upload(client, member_headers, filename="Beach Day.jpg", content=content).json()["data"]["id"]

    response = client.get(f"/api/media/{media_id}/content", headers=member_headers)

    assert response.status_code == 200
    assert response.content == content
    assert response.headers["content-type"] == "image/jpeg"
    assert response.headers["content-disposition"].startswith("inline")


@pytest.mark.integration
def test_download_missing_file(client, member, member_headers, make_media):
    media = make_media(member)

    response = client.get(f"/api/media/{media.id}/content", headers=member_headers)

    assert response.status_code == 404
    assert response.json()["error"] == "FILE_NOT_FOUND"


@pytest.mark.integration
def test_delete_own_media(client, db_session, storage, thumbnail_service, member_headers):
    data = upload(client, member_headers).json()["data"]
    media = db_session.get(MediaFile, data["id"])
    file_path, thumbnail_path = media.file_path, media.thumbnail_path

    response = client.delete(f"/api/media/{data['id']}", headers=member_headers)

    assert response.status_code == 200
    db_session.expire_all()
    assert db_session.get(MediaFile, data["id"]) is None
    assert not storage.file_exists(file_path)
    assert not thumbnail_service.thumbnail_exists(thumbnail_path)


@pytest.mark.integration
def test_delete_someone_elses_media_forbidden(client, make_user, make_media, member_headers):
    other = make_user(email="other@example.com")
    media = make_media(other)

    response = client.delete(f"/api/media/{media.id}", headers=member_headers)

    assert response.status_code == 403
    assert response.json()["error"] == "FORBIDDEN"


@pytest.mark.integration
def test_admin_can_delete_any_media(client, make_user, make_media, admin_headers):
    media = make_media(make_user(email="other@example.com"))

    response = client.delete(f"/api/media/{media.id}", headers=admin_headers)

    assert response.status_code == 200
