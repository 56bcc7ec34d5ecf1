from fastapi import APIRouter

from remind_service.api.v1.endpoints import reminds

api_router = APIRouter()
api_router.include_router(reminds.router)
