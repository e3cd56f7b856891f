from config import get_env_number


def test_env_number_defaults(monkeypatch):
    monkeypatch.delenv("CALC_TEST_VALUE", raising=False)
    assert get_env_number("CALC_TEST_VALUE", 7) == 7


def test_env_number_override(monkeypatch):
    monkeypatch.setenv("CALC_TEST_VALUE", "250")
    assert get_env_number("CALC_TEST_VALUE", 7) == 250
    monkeypatch.setenv("CALC_TEST_VALUE", "0.5")
    assert get_env_number("CALC_TEST_VALUE", 1.0, cast=float) == 0.5


def test_env_number_invalid_falls_back(monkeypatch):
    monkeypatch.setenv("CALC_TEST_VALUE", "fast")
    assert get_env_number("CALC_TEST_VALUE", 7) == 7
