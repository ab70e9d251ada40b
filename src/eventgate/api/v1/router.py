from fastapi import APIRouter

from src.eventgate.api.v1 import admin, auth, events, tenants, users

api_router = APIRouter(prefix="/api/v1")
api_router.include_router(auth.router)
api_router.include_router(users.router)
api_router.include_router(admin.router)
api_router.include_router(tenants.router)
api_router.include_router(events.router)
