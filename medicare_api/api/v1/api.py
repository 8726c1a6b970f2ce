from fastapi import APIRouter
from medicare_api.api.v1.endpoints import admin, auth, donation_requests

api_router = APIRouter()

api_router.include_router(auth.router, prefix="/auth", tags=["authentication"])
api_router.include_router(admin.router, prefix="/admin", tags=["admin"])
api_router.include_router(donation_requests.router, prefix="/donation-requests", tags=["donation-requests"])
