"""
Manufacturing Dashboard Service
Configuration Module
"""
from .settings import Settings, DashboardSettings, get_settings

__all__ = ["Settings", "DashboardSettings", "get_settings"]
