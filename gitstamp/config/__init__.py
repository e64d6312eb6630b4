from .loader import load_config
from .models import (
    CacheConfig,
    GitConfig,
    GitstampConfig,
)

__all__ = [
    "CacheConfig",
    "GitConfig",
    "GitstampConfig",
    "load_config",
]
