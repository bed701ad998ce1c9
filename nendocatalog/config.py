from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

PROJECT_ROOT = Path(__file__).parent.parent


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    model_config = SettingsConfigDict(env_file=".env", env_prefix="NENDOCATALOG_")

    app_name: str = "Nendoroid Catalog"
    debug: bool = False

    database_url: str = "sqlite+aiosqlite:///nendocatalog.db"

    data_dir: Path = PROJECT_ROOT / "data"
    # Local path or http(s) URL. Defaults to data_dir / nendoroids.json
    catalog_path: str | None = None

    default_language: str = "en"

    # Per-photo load budget for catalog-style exports
    image_timeout_seconds: float = 4.0

    export_dir: Path = PROJECT_ROOT / "exports"

    def resolved_catalog_path(self) -> str:
        """Catalog location, falling back to the bundled data directory."""
        if self.catalog_path:
            return self.catalog_path
        return str(self.data_dir / "nendoroids.json")


settings = Settings()


# =============================================================================
# RASTER LIMITS
# =============================================================================

# Largest width or height the export surface may have
MAX_RASTER_DIMENSION = 8192

# Cell size floor after downscaling an oversized grid
MIN_CELL_SIZE = 8

# Box colour used when a record does not define one
DEFAULT_BOX_COLOR = "#ff6600"

# Fallback for colours that cannot be parsed
NEUTRAL_GRAY = "#888888"
