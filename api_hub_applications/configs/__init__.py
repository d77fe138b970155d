"""
Configuration management module.

Provides centralized, type-safe configuration using Pydantic Settings.
"""

from api_hub_applications.configs.hip_environments import HipEnvironment, HipEnvironments
from api_hub_applications.configs.settings import Settings, get_hip_environments, get_settings

__all__ = ["HipEnvironment", "HipEnvironments", "Settings", "get_hip_environments", "get_settings"]
