"""Project configuration for capres."""

from .project_config import CONFIG_FILENAME, ProjectConfig, find_project_config, load_project_config

__all__ = ["CONFIG_FILENAME", "ProjectConfig", "find_project_config", "load_project_config"]
