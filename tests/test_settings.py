import json
import os

from warp_kitten import log as log_module
from warp_kitten import settings
from warp_kitten.settings import PURSUIT_RADIUS, SimulationConfig, load_config


def test_missing_file_gives_defaults(tmp_path):
    assert load_config(tmp_path / "nope.json") == SimulationConfig()


def test_overrides_apply(tmp_path):
    path = tmp_path / "cfg.json"
    path.write_text(json.dumps({"gravity": 0.8, "pursuit_radius": 150}), encoding="utf-8")
    cfg = load_config(path)
    assert cfg.gravity == 0.8
    assert cfg.pursuit_radius == 150.0
    assert cfg.bounce == SimulationConfig().bounce


def test_unknown_and_bad_values_are_ignored(tmp_path):
    path = tmp_path / "cfg.json"
    path.write_text(json.dumps({"warp_factor": 9, "eat_distance": "close", "chase_step": True}), encoding="utf-8")
    assert load_config(path) == SimulationConfig()


def test_broken_json_gives_defaults(tmp_path):
    path = tmp_path / "cfg.json"
    path.write_text("{not json", encoding="utf-8")
    cfg = load_config(path)
    assert cfg.pursuit_radius == PURSUIT_RADIUS


def test_non_object_gives_defaults(tmp_path):
    path = tmp_path / "cfg.json"
    path.write_text("[1, 2, 3]", encoding="utf-8")
    assert load_config(path) == SimulationConfig()


def test_bundled_paths_do_not_depend_on_cwd(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    assert os.path.isabs(settings.CONFIG_FILE)
    assert os.path.isfile(settings.CONFIG_FILE)
    assert os.path.isabs(log_module.ROOT_DIR)
    assert os.path.isdir(os.path.join(log_module.ROOT_DIR, "warp_kitten"))
    assert settings.ASSETS_DIR == os.path.join(log_module.ROOT_DIR, "assets")


def test_default_config_loads_bundled_file_from_any_cwd(tmp_path, monkeypatch):
    with open(settings.CONFIG_FILE, encoding="utf-8") as f:
        bundled = json.load(f)
    monkeypatch.chdir(tmp_path)
    messages = []
    monkeypatch.setattr(settings, "log", messages.append)
    cfg = load_config()
    assert not any("not found" in m for m in messages)
    for key, value in bundled.items():
        assert getattr(cfg, key) == value
