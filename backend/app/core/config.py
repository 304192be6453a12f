"""
Centralized application configuration
"""
import json
from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings"""

    # API Settings
    API_TITLE: str = "Hybrid Catalog API"
    API_VERSION: str = "1.0.0"
    API_DESCRIPTION: str = "Product catalog with text-file metadata and MongoDB payloads"
    API_HOST: str = "0.0.0.0"
    API_PORT: int = 5000
    LOG_LEVEL: str = "INFO"

    # Metadata artifact (constant.tsx)
    CATALOG_FILE_PATH: str = "constant.tsx"
    CATALOG_EXPORT_NAME: str = "products"
    DEFAULT_PRODUCT_TYPE: str = "dashboard"

    # MongoDB
    MONGO_URI: str = "mongodb://localhost:27017"
    MONGO_DB_NAME: str = "catalog"
    PRODUCT_FILES_COLLECTION: str = "productfiles"
    ORDERS_COLLECTION: str = "orders"
    USERS_COLLECTION: str = "users"

    # Auth
    JWT_SECRET: str = "change-me"
    JWT_ALGORITHM: str = "HS256"

    # CORS - Can be string (comma-separated) or JSON array
    # Example: "http://localhost:5173,https://yourdomain.com" or '["http://localhost:5173"]'
    ALLOWED_ORIGINS: Optional[str] = "http://localhost:5173"

    def get_allowed_origins(self) -> List[str]:
        """Parse ALLOWED_ORIGINS string into list"""
        if not self.ALLOWED_ORIGINS:
            return ["http://localhost:5173"]

        # Try JSON parse first (for array format)
        try:
            origins = json.loads(self.ALLOWED_ORIGINS)
            if isinstance(origins, list):
                return origins
        except (json.JSONDecodeError, ValueError):
            pass

        # Fall back to comma-separated string
        return [origin.strip() for origin in self.ALLOWED_ORIGINS.split(",")]

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True)


settings = Settings()
