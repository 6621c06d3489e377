from src.config import Settings
from src.news.schemas.responses import JobResponse, NewsItemResponse


class TestSettings:
    def test_blank_provider_keys_are_unset(self):
        settings = Settings(_env_file=None, news_api_key="  ", gnews_api_key="key")

        assert settings.news_api_key is None
        assert settings.gnews_api_key == "key"

    def test_env_files_and_extra_fields(self):
        assert Settings.model_config["env_file"] == [".env", ".env.local"]
        assert Settings.model_config["extra"] == "ignore"


def test_response_models_read_attributes():
    assert JobResponse.model_config["from_attributes"] is True
    assert NewsItemResponse.model_config["from_attributes"] is True
