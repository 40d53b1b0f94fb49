from starship_jj.config.loader import default_config_path, load_config, read_config_file
from starship_jj.config.models import ENV_PREFIX, BookmarkConfig, Config, GlobalConfig

__all__ = [
    "ENV_PREFIX",
    "BookmarkConfig",
    "Config",
    "GlobalConfig",
    "default_config_path",
    "load_config",
    "read_config_file",
]
