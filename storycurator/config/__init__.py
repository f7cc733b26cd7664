from .settings import StoryCuratorSettings, get_settings, load_settings

__all__ = ["StoryCuratorSettings", "get_settings", "load_settings"]
