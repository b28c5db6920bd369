import subprocess
from datetime import datetime

from PIL import ExifTags, Image

from src.services.media.metadata import (
    MetadataService,
    dms_to_degrees,
    parse_exif_datetime,
    parse_iso_datetime,
)


def test_parse_exif_datetime():
    assert parse_exif_datetime("2024:03:15 10:20:30") == datetime(2024, 3, 15, 10, 20, 30)
    assert parse_exif_datetime(b"2024:03:15 10:20:30\x00") == datetime(2024, 3, 15, 10, 20, 30)
    assert parse_exif_datetime("0000:00:00 00:00:00") is None
    assert parse_exif_datetime(None) is None


def test_parse_iso_datetime_converts_to_naive_utc():
    assert parse_iso_datetime("2024-03-15T10:20:30.000000Z") == datetime(2024, 3, 15, 10, 20, 30)
    assert parse_iso_datetime("2024-03-15T12:20:30+02:00") == datetime(2024, 3, 15, 10, 20, 30)
    assert parse_iso_datetime("yesterday") is None


def test_dms_to_degrees():
    assert dms_to_degrees((52.0, 30.0, 0.0), "N") == 52.5
    assert dms_to_degrees((13.0, 15.0, 0.0), "W") == -13.25
    assert dms_to_degrees("garbage", "N") is None


def test_image_metadata(tmp_path):
    path = tmp_path / "exif.jpg"
    exif = Image.Exif()
    exif[ExifTags.Base.DateTime] = "2023:07:01 18:45:00"
    exif[ExifTags.Base.Make] = "Canon"
    exif[ExifTags.Base.Model] = "EOS R6"
    Image.new("RGB", (320, 200)).save(path, "JPEG", exif=exif.tobytes())

    metadata = MetadataService().extract_metadata(str(path), "image/jpeg")

    assert metadata.date_taken == datetime(2023, 7, 1, 18, 45)
    assert metadata.width == 320
    assert metadata.height == 200
    assert metadata.camera_model == "Canon EOS R6"


def test_image_without_exif(sample_jpeg):
    service = MetadataService()
    metadata = service.extract_metadata(str(sample_jpeg), "image/jpeg")

    assert metadata.date_taken is None
    assert (metadata.width, metadata.height) == (640, 480)
    assert service.extract_date_taken(str(sample_jpeg), "image/jpeg") is None


def test_unreadable_image_returns_empty_metadata(tmp_path):
    path = tmp_path / "broken.jpg"
    path.write_bytes(b"nope")

    metadata = MetadataService().extract_metadata(str(path), "image/jpeg")

    assert metadata.to_dict() == {
        "date_taken": None,
        "width": None,
        "height": None,
        "duration_seconds": None,
        "camera_model": None,
        "latitude": None,
        "longitude": None,
    }


def test_video_metadata_from_ffprobe(mocker, tmp_path):
    service = MetadataService()
    mocker.patch.object(service, "probe", return_value={
        "streams": [
            {"codec_type": "audio"},
            {"codec_type": "video", "width": 1920, "height": 1080},
        ],
        "format": {
            "duration": "12.5",
            "tags": {"creation_time": "2022-12-24T19:00:05.000000Z"},
        },
    })

    metadata = service.extract_metadata(str(tmp_path / "clip.mp4"), "video/mp4")

    assert (metadata.width, metadata.height) == (1920, 1080)
    assert metadata.duration_seconds == 12.5
    assert metadata.date_taken == datetime(2022, 12, 24, 19, 0, 5)


def test_ffprobe_failure_is_not_fatal(mocker, tmp_path):
    service = MetadataService()
    mocker.patch.object(
        service, "probe", side_effect=subprocess.CalledProcessError(1, "ffprobe")
    )

    metadata = service.extract_metadata(str(tmp_path / "clip.mp4"), "video/mp4")

    assert metadata.date_taken is None
    assert metadata.duration_seconds is None


def test_missing_ffprobe_binary(tmp_path):
    service = MetadataService(ffprobe_binary="ffprobe-binary-that-does-not-exist")
    metadata = service.extract_metadata(str(tmp_path / "clip.mp4"), "video/quicktime")
    assert metadata.date_taken is None


def test_probe_invokes_ffprobe_with_json_output(mocker):
    run = mocker.patch(
        "src.services.media.metadata.subprocess.run",
        return_value=subprocess.CompletedProcess([], 0, stdout='{"format": {}}', stderr=""),
    )

    assert MetadataService(ffprobe_binary="/usr/bin/ffprobe").probe("clip.mp4") == {"format": {}}

    args = run.call_args.args[0]
    assert args[0] == "/usr/bin/ffprobe"
    assert "json" in args
    assert args[-1] == "clip.mp4"
