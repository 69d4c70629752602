# tests/core/test_config_management.py
import json

import pytest

from importscope.core.managers.config_manager import ConfigManager
from importscope.core.utils.path_utils import PathUtils

# Een standaard, voorspelbare configuratie voor onze tests
MOCK_SETTINGS_CONTENT = {
    "debug": {
        "level": "WARNING"
    },
    "analyzer": {
        "attach_ast": False
    },
    "loader": {
        "timeout": 30,
        "concurrency": 25
    }
}


@pytest.fixture
def config_env(tmp_path, monkeypatch):
    """
    Een fixture die een geïsoleerde testomgeving opzet voor de ConfigManager:
    - Plaatst een nep 'settings.json' in een tijdelijke map.
    - Laat de gebruikersinstellingen naar een (nog) niet bestaand bestand wijzen.
    - Monkeypatched PathUtils om naar deze tijdelijke locaties te wijzen.
    """
    settings_file = tmp_path / "settings.json"
    settings_file.write_text(json.dumps(MOCK_SETTINGS_CONTENT))
    user_file = tmp_path / "user" / "settings.json"

    monkeypatch.setattr(PathUtils, 'get_settings_file', lambda: settings_file)
    monkeypatch.setattr(PathUtils, 'get_user_settings_file', lambda: user_file)

    manager = ConfigManager()
    manager.reset()  # Forceer herladen vanuit ons nep-bestand
    yield manager, user_file

    # Herstel de echte configuratie voor de volgende tests.
    monkeypatch.undo()
    manager.reset()


def test_config_manager_is_singleton(config_env):
    manager, _ = config_env
    assert ConfigManager() is manager


def test_config_manager_load(config_env):
    """Test of de manager de configuratie correct laadt."""
    manager, _ = config_env
    assert manager.get_nested("debug.level") == "WARNING"
    assert manager.get_nested("loader.timeout") == 30


def test_config_manager_get_nested(config_env):
    """Test het ophalen van geneste waarden."""
    manager, _ = config_env
    assert manager.get_nested("loader.concurrency") == 25
    assert manager.get_nested("non.existent.key", "default") == "default"
    assert manager.get_nested("debug.level.deeper", "fallback") == "fallback"


def test_config_manager_set_nested(config_env):
    """Test het aanpassen van waarden in het geheugen."""
    manager, _ = config_env

    manager.set_nested("debug.level", "INFO")
    assert manager.get_nested("debug.level") == "INFO"

    # Nieuwe sleutels worden gewoon toegevoegd.
    manager.set_nested("output.indent", 4)
    assert manager.get_nested("output.indent") == 4

    # Type-casting naar het type van de oude waarde.
    manager.set_nested("loader.timeout", "60")
    assert manager.get_nested("loader.timeout") == 60

    manager.set_nested("analyzer.attach_ast", "true")
    assert manager.get_nested("analyzer.attach_ast") is True


def test_config_manager_merges_user_settings(config_env):
    """Gebruikersinstellingen overschrijven alleen de opgegeven sleutels."""
    manager, user_file = config_env
    user_file.parent.mkdir()
    user_file.write_text(json.dumps({"loader": {"timeout": 5}}))

    manager.reset()

    assert manager.get_nested("loader.timeout") == 5
    assert manager.get_nested("loader.concurrency") == 25


def test_config_manager_reset(config_env):
    """Test of de reset-functie de configuratie herlaadt vanaf schijf."""
    manager, _ = config_env

    manager.set_nested("debug.level", "DEBUG")
    assert manager.get_nested("debug.level") == "DEBUG"

    manager.reset()

    assert manager.get_nested("debug.level") == "WARNING"


def test_config_manager_survives_broken_file(config_env, tmp_path):
    manager, _ = config_env
    (tmp_path / "settings.json").write_text("{not json")

    manager.reset()

    assert manager.get_nested("debug.level", "fallback") == "fallback"
