"""
Unit tests for application settings.
"""

import pytest
from pydantic import ValidationError

from petsocial.core.config import Settings


class TestSettings:
    def test_test_environment_defaults(self, test_settings):
        assert test_settings.ENVIRONMENT == "test"
        assert test_settings.USE_REDIS is False
        assert test_settings.LOOKUP_CACHE_TTL_SECONDS == 3600
        assert test_settings.uses_sqlite is True

    def test_postgres_url_normalised_to_asyncpg(self):
        settings = Settings(DATABASE_URL="postgresql://u:p@db:5432/petsocial")

        assert settings.database_url == "postgresql+asyncpg://u:p@db:5432/petsocial"
        assert settings.uses_sqlite is False

    def test_rejects_unknown_database_driver(self):
        with pytest.raises(ValidationError):
            Settings(DATABASE_URL="mysql://u:p@db/petsocial")

    def test_rejects_bad_redis_url(self):
        with pytest.raises(ValidationError):
            Settings(REDIS_URL="http://cache:6379")

    def test_log_level_upper_cased(self):
        assert Settings(LOG_LEVEL="warning").LOG_LEVEL == "WARNING"

    def test_rejects_unknown_environment(self):
        with pytest.raises(ValidationError):
            Settings(ENVIRONMENT="qa")

    def test_memory_cache_bound(self):
        assert Settings().MEMORY_CACHE_MAX_ENTRIES == 1024
        with pytest.raises(ValidationError):
            Settings(MEMORY_CACHE_MAX_ENTRIES=0)
