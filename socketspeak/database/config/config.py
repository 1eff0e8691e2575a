from pydantic_settings import BaseSettings
from sqlalchemy.engine import URL

class Settings(BaseSettings):
    """
    Application configuration settings loaded from environment variables
    or a `.env` file. Provides strongly typed access to environment values.
    """

    FRONTEND_URL: str
    """Base URL of the frontend client application (allowed CORS origin)."""

    DB_USERNAME: str = ""
    """Database username credential."""

    DB_PASSWORD: str = ""
    """Database password credential."""

    DB_HOST: str = ""
    """Hostname or IP address of the database server."""

    DB_DATABASE_NAME: str
    """Name of the application’s database (file path for `sqlite`)."""

    DB_DRIVER_NAME: str
    """Database driver (e.g., `postgresql+psycopg2`, `sqlite`)."""

    ACCESS_TOKEN_EXPIRE_MINUTES: int
    """Duration (in minutes) before access tokens expire."""

    SECRET_KEY: str
    """Secret key used for signing session tokens."""

    ALGORITHM: str
    """Cryptographic algorithm used for JWT signing (e.g., `HS256`)."""

    INIT_MODE: str
    """Initialization mode (e.g., `dev`, `prod`, `test`). Tables are created on startup outside `prod`."""

    CLOUDINARY_CLOUD_NAME: str = ""
    """Cloudinary cloud name for image hosting."""

    CLOUDINARY_API_KEY: str = ""
    """Cloudinary API key."""

    CLOUDINARY_API_SECRET: str = ""
    """Cloudinary API secret."""

    IMAGE_UPLOAD_BATCH_SIZE: int = 3
    """Maximum number of images uploaded in parallel."""

    IMAGE_UPLOAD_TIMEOUT: int = 60
    """Per-image upload timeout in seconds."""

    WS_SEND_TIMEOUT: float = 5.0
    """Seconds a realtime frame may take to reach one client before it is dropped."""

    COOKIE_SECURE: bool = True
    """Whether the session cookie is marked `Secure`."""

    LOG_LEVEL: str = "INFO"
    """Root log level for the application loggers."""

    @property
    def database_url(self) -> URL:
        """SQLAlchemy URL assembled from the `DB_*` fields."""
        return URL.create(
            drivername=self.DB_DRIVER_NAME,
            username=self.DB_USERNAME or None,
            password=self.DB_PASSWORD or None,
            host=self.DB_HOST or None,
            database=self.DB_DATABASE_NAME,
        )

    class Config:
        """
        Configuration for Pydantic settings. Loads values from `.env` file by default.
        """
        env_file = ".env"


# Singleton instance of Settings, ready to be imported across the app
settings = Settings()
"""Defines a Settings object that contains the contents of the .env file"""
