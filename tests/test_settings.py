import json

import pytest

from wavescopegui import settings


@pytest.fixture
def config_dir(tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "_config_dir", lambda: str(tmp_path))
    return tmp_path


def test_first_load_creates_defaults(config_dir):
    cfg = settings.load_config()
    path = config_dir / settings.CONFIG_FILENAME
    assert path.is_file()
    assert cfg["visualizer"]["fft_size"] == 2048
    assert cfg["gui"]["last_directory"] == ""
    assert json.loads(path.read_text(encoding="utf-8")) == cfg


def test_round_trip_keeps_user_values(config_dir):
    cfg = settings.load_config()
    cfg["visualizer"]["fft_size"] = 4096
    cfg["gui"]["last_directory"] = "/music"
    settings.save_config(cfg)
    again = settings.load_config()
    assert again["visualizer"]["fft_size"] == 4096
    assert again["gui"]["last_directory"] == "/music"


def test_missing_keys_are_filled_and_unknown_dropped(config_dir):
    path = config_dir / settings.CONFIG_FILENAME
    path.write_text(json.dumps({"visualizer": {"max_bars": 64, "bogus": 1}}),
                    encoding="utf-8")
    cfg = settings.load_config()
    assert cfg["visualizer"]["max_bars"] == 64
    assert "bogus" not in cfg["visualizer"]
    assert cfg["visualizer"]["smoothing"] == 0.8
    assert "window_width" in cfg["gui"]


def test_corrupt_file_is_backed_up(config_dir):
    path = config_dir / settings.CONFIG_FILENAME
    path.write_text("{not json", encoding="utf-8")
    cfg = settings.load_config()
    assert cfg == settings.build_defaults()
    assert (config_dir / (settings.CONFIG_FILENAME + ".bak")).read_text(
        encoding="utf-8") == "{not json"


def test_invalid_values_reset_visualizer_but_keep_gui(config_dir):
    path = config_dir / settings.CONFIG_FILENAME
    path.write_text(json.dumps({
        "visualizer": {"fft_size": 1000},
        "gui": {"last_directory": "/keep"},
    }), encoding="utf-8")
    cfg = settings.load_config()
    assert cfg["visualizer"]["fft_size"] == 2048
    assert cfg["gui"]["last_directory"] == "/keep"
    assert (config_dir / (settings.CONFIG_FILENAME + ".bak")).is_file()
