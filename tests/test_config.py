# File: tests/test_config.py
import json
from pathlib import Path

import pytest
from pydantic import ValidationError

from site2pdf.config import Site2PdfConfig, load_config


def write_file(tmp_path: Path, content: str, suffix: str) -> Path:
    path = tmp_path / f"config{suffix}"
    path.write_text(content, encoding="utf-8")
    return path


@pytest.mark.parametrize(
    "content,expect_exc",
    [
        ("settle_delay: 0\nnavigation_attempts: 3", None),
        (json.dumps({"settle_delay": 0, "navigation_attempts": 3}), None),
        ("navigation_attempts: 0", ValidationError),
        ("unknown_field: 1", ValidationError),
        ("- a\n- b", TypeError),
        ("key: [unclosed", ValueError),
    ],
)
def test_load_config_variants(tmp_path, content, expect_exc):
    suffix = ".json" if content.strip().startswith("{") else ".yaml"
    cfg_path = write_file(tmp_path, content, suffix)
    if expect_exc:
        with pytest.raises(expect_exc):
            load_config(cfg_path)
    else:
        cfg = load_config(cfg_path)
        assert isinstance(cfg, Site2PdfConfig)
        assert cfg.settle_delay == 0
        assert cfg.navigation_attempts == 3


def test_load_config_default_missing_uses_defaults(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    cfg = load_config(None)
    assert cfg == Site2PdfConfig()
    assert cfg.navigation_attempts == 5
    assert cfg.settle_delay == 15.0
    assert cfg.navigation_timeout == 30.0


def test_load_config_default_file(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "configs").mkdir()
    (tmp_path / "configs" / "default.yaml").write_text("pause_delay: 0.5\n", encoding="utf-8")
    assert load_config(None).pause_delay == 0.5


def test_missing_config_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "nope.yaml")


def test_unsupported_suffix(tmp_path):
    with pytest.raises(ValueError):
        load_config(write_file(tmp_path, "a = 1", ".toml"))


def test_blank_selector_rejected():
    with pytest.raises(ValidationError):
        Site2PdfConfig(content_selector="   ")


def test_content_links_substitutes_content_selector():
    cfg = Site2PdfConfig(content_selector="main", content_link_selector="{content} a.x, {content} a.y")
    assert cfg.content_links() == "main a.x, main a.y"


def test_config_is_frozen():
    cfg = Site2PdfConfig()
    with pytest.raises(ValidationError):
        cfg.settle_delay = 1.0
