"""
Tests for rangeread/core/config.py
"""

import pytest

from rangeread.core.config import CROP_REGION, Settings, load_settings
from rangeread.core.errors import ConfigError


class TestLoadSettings:
    def test_full_file(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text(
            "ocr:\n  engine: PaddleOCR\n  lang: ch\n  use_angle_cls: false\n  timeout_s: 5\n"
            "logging:\n  audit_log: out/audit.log\n  level: DEBUG\n",
            encoding="utf-8",
        )
        settings = load_settings(path)
        assert settings == Settings(
            engine="PaddleOCR", lang="ch", use_angle_cls=False, timeout_s=5.0,
            audit_log="out/audit.log", log_level="DEBUG",
        )

    def test_defaults_for_empty_file(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("", encoding="utf-8")
        assert load_settings(path) == Settings()

    def test_env_override(self, tmp_path, monkeypatch):
        path = tmp_path / "custom.yaml"
        path.write_text("ocr:\n  lang: de\n", encoding="utf-8")
        monkeypatch.setenv("RANGEREAD_CONFIG", str(path))
        assert load_settings().lang == "de"

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError):
            load_settings(tmp_path / "nope.yaml")

    def test_unsupported_engine(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("ocr:\n  engine: Tesseract\n", encoding="utf-8")
        with pytest.raises(ConfigError):
            load_settings(path)

    def test_bad_timeout(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("ocr:\n  timeout_s: 0\n", encoding="utf-8")
        with pytest.raises(ConfigError):
            load_settings(path)


def test_crop_region_constant():
    assert (CROP_REGION.x, CROP_REGION.y, CROP_REGION.width, CROP_REGION.height) == (900, 150, 158, 850)
