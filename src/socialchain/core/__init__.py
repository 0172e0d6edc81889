"""
Core module containing configuration, logging, errors and session security.
"""

from .config import (
    BaseConfig,
    DevelopmentConfig,
    ProductionConfig,
    TestingConfig,
    get_config,
)
from .config_validator import ConfigValidator
from .exceptions import (
    AuthenticationError,
    ConfigurationError,
    InvalidTokenError,
    MissingTokenError,
    SocialChainException,
    TokenExpiredError,
    UnsupportedChainError,
)
from .logging import JSONFormatter, SensitiveDataFilter, get_logger, setup_logging
from .security import AuthenticatedUser, SessionCredential, SessionIssuer

__all__ = [
    # Configuration
    "BaseConfig",
    "DevelopmentConfig",
    "TestingConfig",
    "ProductionConfig",
    "get_config",
    "ConfigValidator",
    # Errors
    "SocialChainException",
    "AuthenticationError",
    "UnsupportedChainError",
    "MissingTokenError",
    "InvalidTokenError",
    "TokenExpiredError",
    "ConfigurationError",
    # Logging
    "setup_logging",
    "get_logger",
    "JSONFormatter",
    "SensitiveDataFilter",
    # Sessions
    "SessionIssuer",
    "SessionCredential",
    "AuthenticatedUser",
]
