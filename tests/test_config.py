"""Settings — verifies defaults and environment overrides."""

import pytest
from pydantic import ValidationError

from remoting.config import Settings


def test_defaults_serve_on_8085():
    settings = Settings()
    assert settings.port == 8085
    assert settings.docs_path_template == "/api/{api_name}/docs"


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("REMOTING_PORT", "9000")
    monkeypatch.setenv("REMOTING_API_BASE_URL", "http://todos:9000")
    settings = Settings()
    assert settings.port == 9000
    assert settings.api_base_url == "http://todos:9000"


def test_docs_template_requires_leading_slash():
    with pytest.raises(ValidationError):
        Settings(docs_path_template="api/{api_name}/docs")
