"""
Configuration management.
"""

import os
from dataclasses import dataclass, field


@dataclass
class Config:
    """
    Application configuration.

    Loads from environment variables with sensible defaults. Lifecycle
    functions never read this directly; callers pass the values they need.
    """

    # Server
    host: str = field(default_factory=lambda: os.getenv("HOST", "127.0.0.1"))
    port: int = field(default_factory=lambda: int(os.getenv("PORT", "8000")))
    debug: bool = field(default_factory=lambda: os.getenv("DEBUG", "false").lower() == "true")
    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO").upper())

    # Listings
    listing_expiry_days: int = field(
        default_factory=lambda: int(os.getenv("LISTING_EXPIRY_DAYS", "90"))
    )

    # Shortlets
    shortlet_response_window_hours: int = field(
        default_factory=lambda: int(os.getenv("SHORTLET_RESPONSE_WINDOW_HOURS", "12"))
    )
    shortlet_poll_timeout_ms: int = field(
        default_factory=lambda: int(os.getenv("SHORTLET_POLL_TIMEOUT_MS", "60000"))
    )

    # Viewings
    reliability_window_days: int = field(
        default_factory=lambda: int(os.getenv("RELIABILITY_WINDOW_DAYS", "90"))
    )

    # Data
    data_dir: str = field(default_factory=lambda: os.getenv("DATA_DIR", "./data"))

    @classmethod
    def load(cls) -> "Config":
        """Load configuration from environment."""
        return cls()

    def to_dict(self) -> dict:
        """Convert config to dictionary."""
        return {
            "host": self.host,
            "port": self.port,
            "debug": self.debug,
            "log_level": self.log_level,
            "listing_expiry_days": self.listing_expiry_days,
            "shortlet_response_window_hours": self.shortlet_response_window_hours,
            "shortlet_poll_timeout_ms": self.shortlet_poll_timeout_ms,
            "reliability_window_days": self.reliability_window_days,
            "data_dir": self.data_dir,
        }
