"""Use cases reserved to administrators."""

from .create_admin import create_admin
from .dashboard import DashboardStats, SystemStats, get_dashboard_stats, get_system_stats
from .manage_projects import list_all_projects, remove_project
from .manage_users import delete_user, list_users, update_user

__all__ = [
    "DashboardStats",
    "SystemStats",
    "create_admin",
    "delete_user",
    "get_dashboard_stats",
    "get_system_stats",
    "list_all_projects",
    "list_users",
    "remove_project",
    "update_user",
]
