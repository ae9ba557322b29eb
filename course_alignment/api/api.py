from fastapi import APIRouter
from course_alignment.api.endpoints import analysis

api_router = APIRouter()
api_router.include_router(analysis.router, tags=["analysis"])
