"""Default configuration parameters for the app shell."""

from dataclasses import dataclass


@dataclass(frozen=True)
class StorageKeys:
    """Key names used for persisted phase state."""
    onboarded_key: str = "onboarded"
    token_key: str = "userToken"
    profile_key: str = "userData"


@dataclass(frozen=True)
class SplashParams:
    """Splash screen parameters."""
    duration_seconds: float = 3.2                   # Time the splash stays mounted


@dataclass(frozen=True)
class StoreParams:
    """Persistent store parameters."""
    backend: str = "sqlite"                         # "sqlite" or "memory"
    db_path: str = "cozy_state.db"
    timeout_seconds: float = 30.0                   # SQLite busy timeout


@dataclass(frozen=True)
class AuthParams:
    """Credential validation and local provider parameters."""
    min_password_length: int = 6
    sign_in_latency_seconds: float = 1.5
    guest_latency_seconds: float = 0.8
    sign_up_latency_seconds: float = 1.5
    social_latency_seconds: float = 1.2


@dataclass(frozen=True)
class LoggingParams:
    """Logging parameters."""
    level: str = "INFO"
    format_json: bool = False
    include_timestamp: bool = True


@dataclass(frozen=True)
class DefaultConfig:
    """Complete default configuration."""
    storage: StorageKeys
    splash: SplashParams
    store: StoreParams
    auth: AuthParams
    logging: LoggingParams


def get_default_config() -> DefaultConfig:
    """Get the default configuration instance."""
    return DefaultConfig(
        storage=StorageKeys(),
        splash=SplashParams(),
        store=StoreParams(),
        auth=AuthParams(),
        logging=LoggingParams(),
    )
