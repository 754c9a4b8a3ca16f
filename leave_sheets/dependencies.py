"""
Service providers for the routers. Each request gets fresh service objects
over the shared store.
"""
from fastapi import Depends

from leave_sheets.database import get_store
from leave_sheets.services.auth import AuthService
from leave_sheets.services.leave_service import LeaveService
from leave_sheets.services.settings_service import SettingsService
from leave_sheets.services.sheets_client import TabularStore
from leave_sheets.services.sheets_setup import SheetsSetupService
from leave_sheets.services.user_service import UserService


def get_user_service(store: TabularStore = Depends(get_store)) -> UserService:
    return UserService(store)


def get_auth_service(store: TabularStore = Depends(get_store)) -> AuthService:
    return AuthService(store)


def get_settings_service(store: TabularStore = Depends(get_store)) -> SettingsService:
    return SettingsService(store)


def get_leave_service(store: TabularStore = Depends(get_store)) -> LeaveService:
    return LeaveService(store)


def get_setup_service(store: TabularStore = Depends(get_store)) -> SheetsSetupService:
    return SheetsSetupService(store)
