# pyright: reportMissingImports=false
import json
import os
import sys

import pytest

# Ensure src/ is on sys.path so `iconkit` imports work without an install
PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
SRC_ABS = os.path.abspath(os.path.join(PROJECT_ROOT, "src"))
if SRC_ABS not in sys.path:
    sys.path.insert(0, SRC_ABS)


CLOSE_SVG = '<svg viewBox="0 0 10 10"><path d="M0 0"/></svg>'


@pytest.fixture(autouse=True)
def clean_icon_env(monkeypatch, tmp_path):
    # Keep developer .env files and shell overrides out of tests
    for key in ["ICONKIT_CONFIG_FILE", "ICONKIT_DEFAULT_CLASS", "ICONKIT_FALLBACK", "ICONKIT_ENV", "ICONKIT_PORT", "ICONKIT_LOG_FORMAT", "PORT"]:
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("PROJECT_DIR", str(tmp_path))


@pytest.fixture()
def icon_dir(tmp_path):
    """A small icon set on disk: close, star, nested arrows.left."""
    base = tmp_path / "icons"
    base.mkdir()
    (base / "close.svg").write_text(CLOSE_SVG)
    (base / "star.svg").write_text(
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        '<svg viewBox="0 0 24 24">\n  <polygon points="12 2 15 9 22 9"/>\n</svg>\n'
    )
    (base / "arrows").mkdir()
    (base / "arrows" / "left.svg").write_text('<svg viewBox="0 0 24 24"><line x1="0" y1="0" x2="24" y2="0"/></svg>')
    return base


@pytest.fixture()
def other_icon_dir(tmp_path):
    base = tmp_path / "brand"
    base.mkdir()
    (base / "logo.svg").write_text('<svg viewBox="0 0 16 16"><circle cx="8" cy="8" r="8"/></svg>')
    return base


@pytest.fixture()
def factory(icon_dir, other_icon_dir):
    from iconkit.icon_factory import IconFactory

    f = IconFactory()
    f.add("default", paths=str(icon_dir), prefix="icon")
    f.add("brand", paths=str(other_icon_dir), prefix="brand", class_="brand-icon")
    return f


@pytest.fixture()
def icons_config_file(tmp_path, icon_dir, other_icon_dir):
    cfg = {
        "default_class": "icon",
        "default_attributes": {"aria-hidden": "true"},
        "fallback": "close",
        "sets": {
            "default": {"paths": ["icons"], "prefix": "icon"},
            "brand": {"paths": [str(other_icon_dir)], "prefix": "brand", "class": "brand-icon"},
        },
    }
    config_file = tmp_path / "icons.json"
    config_file.write_text(json.dumps(cfg))
    return config_file


@pytest.fixture()
def icon_config(icons_config_file, monkeypatch):
    import iconkit.config as config_mod

    monkeypatch.setattr(config_mod.Config, "config_file", str(icons_config_file))
    return config_mod.Config()


@pytest.fixture()
def flask_app(icon_config):
    from iconkit.iconserver import create_app

    app = create_app(icon_config)
    app.config["TESTING"] = True
    return app


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()
