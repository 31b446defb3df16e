# workforce/api/v1/api.py
from fastapi import APIRouter
from workforce.api.v1.endpoints import admin, auth, employee

api_router = APIRouter()

api_router.include_router(auth.router, prefix="/auth", tags=["Auth"])
api_router.include_router(employee.router, prefix="/employee", tags=["Employee"])
api_router.include_router(admin.router, prefix="/admin", tags=["Admin"])
