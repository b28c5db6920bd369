"""Metadata extraction for uploaded photos (EXIF via Pillow) and videos (ffprobe)."""
import json
import logging
import subprocess
from dataclasses import dataclass, asdict
from datetime import datetime, timezone
from typing import Any, Optional

from PIL import ExifTags, Image, UnidentifiedImageError

logger = logging.getLogger(__name__)

EXIF_DATE_FORMAT = "%Y:%m:%d %H:%M:%S"


@dataclass
class MediaMetadata:
    """Metadata pulled out of a media file; every field is optional."""
    date_taken: Optional[datetime] = None
    width: Optional[int] = None
    height: Optional[int] = None
    duration_seconds: Optional[float] = None
    camera_model: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def parse_exif_datetime(value: Any) -> Optional[datetime]:
    if not value:
        return None
    if isinstance(value, bytes):
        value = value.decode("utf-8", errors="ignore")
    text = str(value).strip().rstrip("\x00")
    try:
        return datetime.strptime(text, EXIF_DATE_FORMAT)
    except ValueError:
        return None


def parse_iso_datetime(value: Optional[str]) -> Optional[datetime]:
    """Parse an ISO 8601 timestamp into naive UTC."""
    if not value:
        return None
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def dms_to_degrees(dms: Any, ref: Any) -> Optional[float]:
    """Convert an EXIF (degrees, minutes, seconds) triple to signed decimal degrees."""
    try:
        degrees, minutes, seconds = (float(part) for part in dms)
    except (TypeError, ValueError, ZeroDivisionError):
        return None
    value = degrees + minutes / 60.0 + seconds / 3600.0
    if isinstance(ref, bytes):
        ref = ref.decode("ascii", errors="ignore")
    if str(ref).strip().upper() in ("S", "W"):
        value = -value
    return value


class MetadataService:
    """Extract capture date, dimensions, camera and location from media files."""

    def __init__(self, ffprobe_binary: str = "ffprobe", ffprobe_timeout: int = 30):
        self.ffprobe_binary = ffprobe_binary
        self.ffprobe_timeout = ffprobe_timeout

    def extract_date_taken(self, file_path: str, content_type: str) -> Optional[datetime]:
        return self.extract_metadata(file_path, content_type).date_taken

    def extract_metadata(self, file_path: str, content_type: str) -> MediaMetadata:
        """
        Extract metadata without ever raising.

        Args:
            file_path: Path of the file on disk
            content_type: MIME type used to pick the extractor

        Returns:
            MediaMetadata (fields left as None when unavailable)
        """
        metadata = MediaMetadata()
        content_type = (content_type or "").lower()

        try:
            if content_type.startswith("image/"):
                self._extract_image_metadata(file_path, metadata)
            elif content_type.startswith("video/"):
                self._extract_video_metadata(file_path, metadata)
        except Exception as e:
            logger.warning(f"Failed to extract metadata from file: {file_path}: {e}")

        return metadata

    # ------------------------------------------------------------------
    # Images
    # ------------------------------------------------------------------

    def _extract_image_metadata(self, file_path: str, metadata: MediaMetadata) -> None:
        try:
            with Image.open(file_path) as img:
                metadata.width, metadata.height = img.size
                exif = img.getexif()
        except (UnidentifiedImageError, OSError) as e:
            logger.warning(f"Failed to read image: {file_path}: {e}")
            return

        if not exif:
            return

        exif_ifd = exif.get_ifd(ExifTags.IFD.Exif)
        metadata.date_taken = (
            parse_exif_datetime(exif_ifd.get(ExifTags.Base.DateTimeOriginal))
            or parse_exif_datetime(exif.get(ExifTags.Base.DateTime))
        )

        make = exif.get(ExifTags.Base.Make)
        model = exif.get(ExifTags.Base.Model)
        if make and model:
            metadata.camera_model = f"{str(make).strip()} {str(model).strip()}".strip()

        gps = exif.get_ifd(ExifTags.IFD.GPSInfo)
        if gps:
            lat = gps.get(ExifTags.GPS.GPSLatitude)
            lon = gps.get(ExifTags.GPS.GPSLongitude)
            if lat and lon:
                metadata.latitude = dms_to_degrees(lat, gps.get(ExifTags.GPS.GPSLatitudeRef, "N"))
                metadata.longitude = dms_to_degrees(lon, gps.get(ExifTags.GPS.GPSLongitudeRef, "E"))

    # ------------------------------------------------------------------
    # Videos
    # ------------------------------------------------------------------

    def probe(self, file_path: str) -> dict[str, Any]:
        """Run ffprobe and return its JSON report."""
        result = subprocess.run(
            [
                self.ffprobe_binary,
                "-v", "error",
                "-print_format", "json",
                "-show_format",
                "-show_streams",
                file_path,
            ],
            capture_output=True,
            text=True,
            timeout=self.ffprobe_timeout,
            check=True,
        )
        return json.loads(result.stdout or "{}")

    def _extract_video_metadata(self, file_path: str, metadata: MediaMetadata) -> None:
        try:
            info = self.probe(file_path)
        except (OSError, subprocess.SubprocessError, json.JSONDecodeError) as e:
            logger.warning(f"Failed to extract video metadata from file: {file_path}: {e}")
            return

        video_stream = next(
            (s for s in info.get("streams", []) if s.get("codec_type") == "video"),
            None,
        )
        if video_stream:
            metadata.width = video_stream.get("width")
            metadata.height = video_stream.get("height")

        fmt = info.get("format", {})
        duration = fmt.get("duration") or (video_stream or {}).get("duration")
        if duration is not None:
            try:
                metadata.duration_seconds = float(duration)
            except ValueError:
                pass

        tags = fmt.get("tags") or {}
        metadata.date_taken = parse_iso_datetime(tags.get("creation_time"))
