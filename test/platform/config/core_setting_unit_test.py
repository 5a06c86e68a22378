from pydantic import ValidationError
import pytest

from booking_pipeline.platform.config.core_setting import Settings


@pytest.mark.unit
class TestSettings:
    def test_retry_attempts_below_one_are_rejected(self) -> None:
        with pytest.raises(ValidationError):
            Settings(ORDER_CONSUMER_RETRY_ATTEMPTS=0)

    def test_retry_attempts_read_from_environment(self, monkeypatch) -> None:
        monkeypatch.setenv('ORDER_CONSUMER_RETRY_ATTEMPTS', '5')

        assert Settings().ORDER_CONSUMER_RETRY_ATTEMPTS == 5

    def test_database_url_targets_configured_database(self, monkeypatch) -> None:
        monkeypatch.setenv('POSTGRES_DB', 'orders_db')

        assert Settings().DATABASE_URL_ASYNC.endswith('/orders_db')
