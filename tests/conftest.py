import pytest

from apps.calc.config import get_settings


@pytest.fixture(autouse=True)
def _fresh_calc_settings():
    # ustawienia są cache'owane; testy z monkeypatch.setenv muszą widzieć nowe wartości
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
