"""Enums for database models."""
import enum


class MediaType(str, enum.Enum):
    """Kind of stored media."""
    image = "image"
    video = "video"
