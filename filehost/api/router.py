from fastapi import APIRouter

from filehost.api.endpoints import admin, auth, files, public, user

api_router = APIRouter()

# Include routers
api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(admin.router, prefix="/admin", tags=["admin"])
api_router.include_router(user.router, prefix="/user", tags=["user"])
api_router.include_router(files.router, prefix="/files", tags=["files"])
api_router.include_router(public.router, prefix="/public", tags=["public"])
