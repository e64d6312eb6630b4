from pydantic import BaseModel, Field
from typing import Literal


class CacheConfig(BaseModel):
    directory: str = ".gitstamp/cache"
    warn_size_kb: float | None = Field(default=None, gt=0)


class GitConfig(BaseModel):
    binary: str = "git"
    timeout: float = Field(default=10.0, gt=0)


class GitstampConfig(BaseModel):
    cache: CacheConfig = Field(default_factory=CacheConfig)
    git: GitConfig = Field(default_factory=GitConfig)
    log_level: Literal["debug", "info", "warn", "error"] = "info"
