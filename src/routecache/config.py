"""Cache configuration.

CacheConfig is a frozen dataclass — immutable after creation, IDE-autocompletable,
no string-key dict lookups once built.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from routecache.errors import ConfigurationError

# Option keys recognized by ``CacheConfig.from_mapping``
CONFIG_CACHE_ENABLED = "cache_enabled"
CONFIG_CACHE_FILE = "cache_file"


@dataclass(frozen=True, slots=True)
class CacheConfig:
    """Route cache configuration. Immutable after creation.

    Caching is off unless asked for::

        config = CacheConfig(enabled=True, file_path="var/cache/routes.json")

    When ``enabled`` is false every cache operation is a no-op,
    whatever ``file_path`` says.
    """

    enabled: bool = False
    file_path: Path | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.enabled, bool):
            msg = f"cache_enabled must be a bool, got {type(self.enabled).__name__}"
            raise ConfigurationError(msg)

        path = self.file_path
        if isinstance(path, str):
            if not path:
                path = None
            else:
                path = Path(path)
            # Frozen: normalize through object.__setattr__
            object.__setattr__(self, "file_path", path)
        elif path is not None and not isinstance(path, Path):
            msg = f"cache_file must be a str or Path, got {type(path).__name__}"
            raise ConfigurationError(msg)

    @classmethod
    def from_mapping(cls, config: Mapping[str, Any] | None) -> "CacheConfig":
        """Build a config from a ``{cache_enabled, cache_file}`` mapping.

        Missing keys (or a missing mapping) mean caching is disabled.
        """
        if not config:
            return cls()
        return cls(
            enabled=config.get(CONFIG_CACHE_ENABLED, False),
            file_path=config.get(CONFIG_CACHE_FILE),
        )
