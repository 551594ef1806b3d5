from scrabble.config_loader import CONFIG_ENV_VAR, ConfigLoader, get_config


def test_singleton():
    assert get_config() is ConfigLoader()


def test_defaults_when_file_missing(tmp_path):
    config = get_config()
    config.reload(tmp_path / "missing.yaml")

    assert config.get_table_name() == "ScrabbleGames"
    assert config.get_max_versions() == 10
    assert config.get_batch_size() == 100_000
    assert config.get_loader_options() == {
        "file_name": "scrabble_games.csv",
        "batch_size": 100_000,
        "encoding": "utf-8",
    }


def test_yaml_overrides_are_merged(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(
        "store:\n"
        "  table_name: Games2019\n"
        "  thrift:\n"
        "    timeout_ms: 5000\n"
        "    transport: framed\n"
        "loader:\n"
        "  batch_size: 250\n",
        encoding="utf-8",
    )
    config = get_config()
    config.reload(path)

    assert config.get_table_name() == "Games2019"
    assert config.get_max_versions() == 10
    assert config.get_batch_size() == 250
    assert config.get("loader.file_name") == "scrabble_games.csv"

    options = config.get_thrift_options()
    assert options["timeout"] == 5000
    assert options["transport"] == "framed"
    assert options["protocol"] == "binary"
    assert "table_prefix" not in options


def test_dot_notation_default():
    config = get_config()
    assert config.get("store.nope.deeper", "fallback") == "fallback"
    assert config.get("store.table_name.deeper", 3) == 3


def test_invalid_yaml_falls_back_to_defaults(tmp_path):
    path = tmp_path / "broken.yaml"
    path.write_text("store: [unclosed\n", encoding="utf-8")
    config = get_config()
    config.reload(path)
    assert config.get_table_name() == "ScrabbleGames"


def test_env_var_selects_file(tmp_path, monkeypatch):
    path = tmp_path / "env.yaml"
    path.write_text("store:\n  max_versions: 4\n", encoding="utf-8")
    monkeypatch.setenv(CONFIG_ENV_VAR, str(path))

    config = get_config()
    config.reload()
    assert config.get_max_versions() == 4


def test_repository_config_matches_defaults():
    from scrabble.config_loader import DEFAULT_CONFIG_PATH

    config = get_config()
    config.reload(DEFAULT_CONFIG_PATH)
    assert config._config == ConfigLoader._get_default_config()
