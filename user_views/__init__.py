"""Composite read models for local users."""

from .errors import LocalUserIntegrityError, LocalUserNotFoundError, LocalUserViewError
from .local_user_view import LocalUserSettingsView, LocalUserView
from .repositories.local_user_views import local_user_settings_views, local_user_views

__all__ = [
    "LocalUserIntegrityError",
    "LocalUserNotFoundError",
    "LocalUserSettingsView",
    "LocalUserView",
    "LocalUserViewError",
    "local_user_settings_views",
    "local_user_views",
]
