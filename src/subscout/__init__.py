"""SubScout core package.

SubScout finds subtitle files lying next to (or in ``Subs`` folders near)
video files and places copies of them beside the video under a predictable
name. The package is organized into focused modules:

- **scanner**: Scan orchestration over every catalog video
- **matcher**: Template compilation, language detection and relatedness
- **file_discovery**: Bounded walking of the directories around a video
- **destination_builder**: Destination filenames from the destination pattern
- **match_handler**: Copy/move placement and overwrite decisions
- **trigger**: Debounced scan launching on library changes
- **watcher**: Filesystem change source feeding the trigger
- **config** / **validation**: YAML configuration loading and checking

The main entry point is the ``Scanner`` class.
"""

from .catalog import ConfiguredCatalog, FilesystemCatalog, StaticCatalog
from .config import ScanConfig
from .models import ScanReport, VideoItem
from .scanner import ConfigurationRequiredError, Scanner
from .version import __version__

__all__ = [
    "__version__",
    "ConfigurationRequiredError",
    "ConfiguredCatalog",
    "FilesystemCatalog",
    "ScanConfig",
    "ScanReport",
    "Scanner",
    "StaticCatalog",
    "VideoItem",
]
