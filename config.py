import os
from dataclasses import dataclass
from dotenv import load_dotenv

load_dotenv()

@dataclass
class Settings:
    # API settings
    api_host: str = os.getenv("API_HOST", "127.0.0.1")
    api_port: int = int(os.getenv("API_PORT", "1337"))

    # Storage settings
    books_file: str = os.getenv("LIBRARY_BOOKS_FILE", os.path.join("data", "books.json"))

    # Logging
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    # Application settings
    app_name: str = os.getenv("APP_NAME", "Library Catalog API")
    app_version: str = os.getenv("APP_VERSION", "1.0.0")
    debug: bool = os.getenv("DEBUG", "False").lower() in ("true", "1", "yes")

    # CLI connectivity check
    ping_timeout: float = float(os.getenv("PING_TIMEOUT", "5"))

    @property
    def base_url(self) -> str:
        return f"http://{self.api_host}:{self.api_port}"


settings = Settings()
