"""Utility functions for exetel."""

from exetel.utils.env import env_setting, load_env_file_if_present

__all__ = ["env_setting", "load_env_file_if_present"]
