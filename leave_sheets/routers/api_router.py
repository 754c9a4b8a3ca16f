from fastapi import APIRouter
from leave_sheets.routers import auth, leave, settings, setup, users

# Routers are aggregated here; main.py only imports this hub.
api_router = APIRouter()

api_router.include_router(auth.router, tags=["Authentication"])
api_router.include_router(users.router, tags=["Users"])
api_router.include_router(leave.router, tags=["Leave"])
api_router.include_router(settings.router, tags=["Settings"])
api_router.include_router(setup.router, prefix="/setup", tags=["Sheets Setup"])
