from fastapi import APIRouter
from salonhub.api.v1.endpoints import auth, salons, users

api_router = APIRouter()
api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(users.router, prefix="/users", tags=["users"])
api_router.include_router(salons.router, prefix="/salons", tags=["salons"])
