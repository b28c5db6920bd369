from fastapi import APIRouter
from src.api.v1.endpoints import auth, media, thumbnails, users


api_router = APIRouter()

api_router.include_router(auth.router, prefix="/auth", tags=["authentication"])
api_router.include_router(media.router, prefix="/media", tags=["media"])
api_router.include_router(thumbnails.router, prefix="/thumbnail", tags=["thumbnails"])
api_router.include_router(users.router, prefix="/user", tags=["users"])
