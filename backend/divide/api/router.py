"""
Main API router that includes all route modules.
"""
from fastapi import APIRouter
from divide.api.routes import settlements, trips

api_router = APIRouter()

# Include all route modules
api_router.include_router(settlements.router)
api_router.include_router(trips.router)
