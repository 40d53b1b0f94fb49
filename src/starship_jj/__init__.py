"""starship-jj: Jujutsu repository status for the starship prompt.

Reads the working-copy commit of a jj repository once per prompt and prints
the nearest bookmarks, the commit description, warnings and diff metrics as
ANSI-styled text.
"""

from starship_jj._version import __version__

# Configuration
from starship_jj.config import BookmarkConfig, Config, GlobalConfig, load_config

# Engines
from starship_jj.engine import Engine, JjCliEngine

# Rendering
from starship_jj.bookmarks import Bookmark, BookmarkResolver, IgnoreEmpty
from starship_jj.diffstat import DiffStats
from starship_jj.render import RenderPipeline, Watchdog
from starship_jj.state import RepoStateCache
from starship_jj.style import Style

# Exceptions
from starship_jj.exceptions import ConfigurationError, EngineError, StarshipJjError

__all__ = [
    "__version__",
    # Configuration
    "BookmarkConfig",
    "Config",
    "GlobalConfig",
    "load_config",
    # Engines
    "Engine",
    "JjCliEngine",
    # Rendering
    "Bookmark",
    "BookmarkResolver",
    "DiffStats",
    "IgnoreEmpty",
    "RenderPipeline",
    "RepoStateCache",
    "Style",
    "Watchdog",
    # Exceptions
    "StarshipJjError",
    "EngineError",
    "ConfigurationError",
]
