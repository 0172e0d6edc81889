"""
Configuration validator for the SocialChain backend.

Validates configuration values at startup, ensuring required fields are
present, have correct types, and are within acceptable ranges.
"""

from typing import List
from urllib.parse import urlparse

from .config import DEFAULT_JWT_SECRET, BaseConfig
from .logging import get_logger

logger = get_logger(__name__)


class ConfigValidator:
    """Validates configuration values."""

    REQUIRED_FIELDS = {
        "DATABASE_URL",
        "JWT_SECRET",
        "JWT_ALGORITHM",
    }

    FIELD_TYPES = {
        "APP_NAME": str,
        "APP_VERSION": str,
        "ENVIRONMENT": str,
        "DEBUG": bool,
        "API_HOST": str,
        "API_PORT": int,
        "CORS_ORIGINS": str,
        "DATABASE_URL": str,
        "DATABASE_ECHO": bool,
        "DATABASE_POOL_SIZE": int,
        "DATABASE_MAX_OVERFLOW": int,
        "LOG_LEVEL": str,
        "LOG_FORMAT": str,
        "LOG_DIR": str,
        "JWT_SECRET": str,
        "JWT_ALGORITHM": str,
        "TOKEN_TTL_SECONDS": int,
        "CHALLENGE_TTL_SECONDS": int,
    }

    VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
    VALID_LOG_FORMATS = {"json", "text"}
    VALID_ENVIRONMENTS = {"development", "testing", "production"}
    # Symmetric algorithms only: the same secret signs and verifies.
    VALID_JWT_ALGORITHMS = {"HS256", "HS384", "HS512"}

    API_PORT_MIN = 1
    API_PORT_MAX = 65535
    MIN_PRODUCTION_SECRET_LENGTH = 32

    def validate_all(self, config: BaseConfig) -> List[str]:
        """
        Validate all configuration aspects.

        Args:
            config: Configuration object to validate

        Returns:
            List of validation error messages (empty if valid)
        """
        errors = []
        errors.extend(self.validate_required_fields(config))
        errors.extend(self.validate_field_types(config))
        errors.extend(self.validate_field_ranges(config))
        errors.extend(self.validate_enumerations(config))
        errors.extend(self.validate_secret(config))
        errors.extend(self.validate_urls(config))

        if errors:
            logger.warning(f"Configuration validation failed with {len(errors)} error(s)")
            for error in errors:
                logger.warning(f"  - {error}")

        return errors

    def validate_required_fields(self, config: BaseConfig) -> List[str]:
        errors = []
        for field_name in sorted(self.REQUIRED_FIELDS):
            value = getattr(config, field_name, None)
            if value is None:
                errors.append(f"Required field '{field_name}' is missing")
            elif isinstance(value, str) and not value.strip():
                errors.append(f"Required field '{field_name}' is empty")
        return errors

    def validate_field_types(self, config: BaseConfig) -> List[str]:
        errors = []
        for field_name, expected_type in self.FIELD_TYPES.items():
            value = getattr(config, field_name, None)
            if value is None:
                continue
            # bool is a subclass of int; reject it for numeric fields
            if not isinstance(value, expected_type) or (
                expected_type is int and isinstance(value, bool)
            ):
                errors.append(
                    f"Field '{field_name}' has invalid type. "
                    f"Expected {expected_type.__name__}, got {type(value).__name__}"
                )
        return errors

    def validate_field_ranges(self, config: BaseConfig) -> List[str]:
        errors = []

        if not (self.API_PORT_MIN <= config.API_PORT <= self.API_PORT_MAX):
            errors.append(
                f"API_PORT must be between {self.API_PORT_MIN} and {self.API_PORT_MAX}, "
                f"got {config.API_PORT}"
            )

        if config.DATABASE_POOL_SIZE < 1:
            errors.append(f"DATABASE_POOL_SIZE must be at least 1, got {config.DATABASE_POOL_SIZE}")

        if config.TOKEN_TTL_SECONDS <= 0:
            errors.append(f"TOKEN_TTL_SECONDS must be positive, got {config.TOKEN_TTL_SECONDS}")

        if config.CHALLENGE_TTL_SECONDS <= 0:
            errors.append(
                f"CHALLENGE_TTL_SECONDS must be positive, got {config.CHALLENGE_TTL_SECONDS}"
            )

        return errors

    def validate_enumerations(self, config: BaseConfig) -> List[str]:
        errors = []

        if config.LOG_LEVEL not in self.VALID_LOG_LEVELS:
            errors.append(f"LOG_LEVEL must be one of {sorted(self.VALID_LOG_LEVELS)}, got {config.LOG_LEVEL}")

        if config.LOG_FORMAT not in self.VALID_LOG_FORMATS:
            errors.append(f"LOG_FORMAT must be one of {sorted(self.VALID_LOG_FORMATS)}, got {config.LOG_FORMAT}")

        if config.ENVIRONMENT not in self.VALID_ENVIRONMENTS:
            errors.append(
                f"ENVIRONMENT must be one of {sorted(self.VALID_ENVIRONMENTS)}, got {config.ENVIRONMENT}"
            )

        if config.JWT_ALGORITHM not in self.VALID_JWT_ALGORITHMS:
            errors.append(
                f"JWT_ALGORITHM must be one of {sorted(self.VALID_JWT_ALGORITHMS)}, got {config.JWT_ALGORITHM}"
            )

        return errors

    def validate_secret(self, config: BaseConfig) -> List[str]:
        """Reject the placeholder secret and short secrets in production."""
        errors = []
        if config.ENVIRONMENT != "production":
            return errors

        if config.JWT_SECRET == DEFAULT_JWT_SECRET:
            errors.append("JWT_SECRET must be changed from the default value in production")
        elif len(config.JWT_SECRET) < self.MIN_PRODUCTION_SECRET_LENGTH:
            errors.append(
                f"JWT_SECRET must be at least {self.MIN_PRODUCTION_SECRET_LENGTH} characters in production"
            )
        return errors

    def validate_urls(self, config: BaseConfig) -> List[str]:
        errors = []
        if config.DATABASE_URL and not self._is_valid_url(config.DATABASE_URL):
            errors.append("Field 'DATABASE_URL' has invalid URL format")
        return errors

    @staticmethod
    def _is_valid_url(url: str) -> bool:
        """
        Check if a URL is valid.

        Database URLs only need a scheme; sqlite URLs carry no host.
        """
        try:
            result = urlparse(url)
            return bool(result.scheme)
        except ValueError:
            return False
