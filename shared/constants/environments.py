from enum import Enum


class Environment(str, Enum):
    """Deployment environments the adapter distinguishes between."""

    PRODUCTION = "production"
    STAGING = "staging"
    TESTING = "testing"
    DEVELOPMENT = "development"

    @classmethod
    def is_production(cls, env: str) -> bool:
        """Check if environment is production."""
        return env.lower() == cls.PRODUCTION.value

    @classmethod
    def exposes_docs(cls, env: str) -> bool:
        """OpenAPI docs are served everywhere except production."""
        return not cls.is_production(env)
