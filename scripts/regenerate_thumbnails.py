#!/usr/bin/env python
"""Regenerate missing (or, with --all, every) thumbnail from stored originals."""
import argparse
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from tqdm import tqdm

from src.app.dependencies import get_file_storage, get_thumbnail_service
from src.db.base import SessionLocal
from src.models import MediaFile
from src.services.media.thumbnails import ThumbnailError


def regenerate(regenerate_all: bool = False) -> tuple[int, int]:
    """
    Rebuild thumbnails and update the rows.

    Returns:
        Tuple of (regenerated, failed)
    """
    storage = get_file_storage()
    thumbnails = get_thumbnail_service()
    db = SessionLocal()
    regenerated = failed = 0

    try:
        media_files = db.query(MediaFile).order_by(MediaFile.id).all()
        for media in tqdm(media_files, desc="thumbnails", unit="file"):
            if not regenerate_all and thumbnails.thumbnail_exists(media.thumbnail_path):
                continue

            if not storage.file_exists(media.file_path):
                tqdm.write(f"⚠️  Original missing for media {media.id}: {media.file_path}")
                failed += 1
                continue

            if media.thumbnail_path:
                thumbnails.delete_thumbnail(media.thumbnail_path)

            try:
                media.thumbnail_path = thumbnails.generate_thumbnail(
                    str(storage.get_full_path(media.file_path)),
                    media.file_name,
                    media.media_type,
                    media.taken_at,
                )
                regenerated += 1
            except ThumbnailError as e:
                tqdm.write(f"❌ Media {media.id}: {e}")
                media.thumbnail_path = ""
                failed += 1

            db.commit()
    finally:
        db.close()

    return regenerated, failed


def main():
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--all", action="store_true", help="rebuild every thumbnail, not only missing ones")
    args = parser.parse_args()

    regenerated, failed = regenerate(regenerate_all=args.all)
    print(f"✅ Regenerated {regenerated} thumbnails ({failed} failed)")
    return 1 if failed else 0


if __name__ == "__main__":
    sys.exit(main())
