# tests/test_config.py
import src.config as config


class BrokenSecrets:
    def __contains__(self, item):
        raise FileNotFoundError("no secrets.toml")

    def get(self, *a, **k):
        raise FileNotFoundError("no secrets.toml")


def test_get_secret_prefers_top_level_secret(monkeypatch):
    monkeypatch.setattr(config.st, "secrets", {"OPENWEATHER_API_KEY": " abc "})
    monkeypatch.setenv("OPENWEATHER_API_KEY", "from-env")

    assert config.get_secret("OPENWEATHER_API_KEY") == "abc"


def test_get_secret_reads_section_key(monkeypatch):
    monkeypatch.setattr(config.st, "secrets", {"openweather": {"api_key": "sect"}})
    monkeypatch.delenv("OPENWEATHER_API_KEY", raising=False)

    assert config.get_secret("OPENWEATHER_API_KEY", section="openweather", key="api_key") == "sect"


def test_get_secret_falls_back_to_env(monkeypatch):
    monkeypatch.setattr(config.st, "secrets", {"OPENWEATHER_API_KEY": "   "})
    monkeypatch.setenv("OPENWEATHER_API_KEY", "from-env")

    assert config.get_secret("OPENWEATHER_API_KEY") == "from-env"


def test_get_secret_survives_missing_secrets_file(monkeypatch):
    monkeypatch.setattr(config.st, "secrets", BrokenSecrets())
    monkeypatch.setenv("OPENWEATHER_API_KEY", "from-env")

    assert config.get_secret("OPENWEATHER_API_KEY") == "from-env"


def test_get_secret_returns_none_when_unset(monkeypatch):
    monkeypatch.setattr(config.st, "secrets", {})
    monkeypatch.delenv("OPENWEATHER_API_KEY", raising=False)

    assert config.get_secret("OPENWEATHER_API_KEY") is None


def test_gradient_runs_cold_to_hot():
    stops = sorted(config.HEAT_GRADIENT)
    assert stops[0] == 0.0 and stops[-1] == 1.0
    assert config.HEAT_GRADIENT[0.0] == "#2c7bb6"
    assert config.HEAT_GRADIENT[1.0] == "#d73027"
