"""
config.py - Configuration model for romfilter
"""

from pathlib import Path
from typing import List, Optional
from pydantic import BaseModel, Field, ValidationError
from rich.console import Console
import sys

try:
    import tomllib
except ModuleNotFoundError:
    import tomli as tomllib

console = Console()

DEFAULT_BASE_URL = "https://myrient.erista.me/files/"
DEFAULT_SUBDIR = "No-Intro"


class FilterOptions(BaseModel):
    """Selection policy applied to every listed file."""

    region_limit: bool = Field(
        default=True,
        description="Require the configured region tag (or World) on every file"
    )
    region: str = Field(
        default="USA",
        description="Accepted region tag when region_limit is on"
    )
    smart_filters: bool = Field(
        default=True,
        description="Drop betas, prototypes, demos and other non-retail dumps"
    )
    exclude_patterns: List[str] = Field(
        default_factory=list,
        description="Reject files with any tag containing one of these substrings"
    )
    latest_revision: bool = Field(
        default=True,
        description="Keep only the highest revision of each canonical title"
    )


class ListingConfig(BaseModel):
    base_url: str = DEFAULT_BASE_URL
    subdir: str = DEFAULT_SUBDIR
    timeout: int = 30
    min_interval_seconds: float = Field(
        default=1.0,
        description="Minimum spacing between requests to the same host"
    )
    max_retries: int = 3


class DownloadConfig(BaseModel):
    output_dir: Path = Path("roms")
    extract_archives: bool = True
    chunk_size: int = 64 * 1024


class RomfilterConfig(BaseModel):
    listing: ListingConfig = Field(default_factory=ListingConfig)
    filters: FilterOptions = Field(default_factory=FilterOptions)
    download: DownloadConfig = Field(default_factory=DownloadConfig)
    config_path: Optional[Path] = None


def load_config(config_path: Optional[Path] = None) -> RomfilterConfig:
    """Load configuration from TOML file, or built-in defaults when no path is given"""

    if config_path is None:
        return RomfilterConfig()

    if not config_path.exists():
        console.print(f"[red][ERROR][/red] Configuration file not found: {config_path}")
        console.print("Copy config.example.toml to config.toml or omit --config")
        sys.exit(1)

    try:
        with open(config_path, "rb") as f:
            config_data = tomllib.load(f)

        # Unknown sections and keys are ignored by the models
        config = RomfilterConfig(
            listing=ListingConfig(**config_data.get("listing", {})),
            filters=FilterOptions(**config_data.get("filters", {})),
            download=DownloadConfig(**config_data.get("download", {})),
            config_path=config_path
        )

        return config

    except (OSError, tomllib.TOMLDecodeError, ValidationError, TypeError) as e:
        console.print(f"[red][ERROR][/red] Error loading configuration: {e}")
        sys.exit(1)
