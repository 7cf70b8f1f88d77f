import os
from dataclasses import dataclass
from pathlib import Path
from typing import Union

import yaml
from loguru import logger

from rangeread.core.errors import ConfigError
from rangeread.domain.models import CropRegion

# Region of the display that holds the range readout. Change requires a redeploy.
CROP_REGION = CropRegion(x=900, y=150, width=158, height=850)

DEFAULT_CONFIG_PATH = "config/config.yaml"
CONFIG_ENV_VAR = "RANGEREAD_CONFIG"

SUPPORTED_ENGINES = ("PaddleOCR",)


@dataclass(frozen=True)
class Settings:
    engine: str = "PaddleOCR"
    lang: str = "en"
    use_angle_cls: bool = True
    timeout_s: float = 30.0
    audit_log: str = "logs/audit.log"
    log_level: str = "INFO"


def load_settings(config_path: Union[str, Path, None] = None) -> Settings:
    """Load settings from YAML. Missing keys fall back to the defaults above."""
    path = Path(config_path or os.environ.get(CONFIG_ENV_VAR, DEFAULT_CONFIG_PATH))
    logger.info(f"Loading config: {path}")
    try:
        with open(path, 'r', encoding='utf-8') as f:
            raw = yaml.safe_load(f) or {}
    except FileNotFoundError as e:
        raise ConfigError(f"Config file not found: {path}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Config file {path} is not valid YAML: {e}") from e

    ocr = raw.get('ocr', {}) or {}
    logging_cfg = raw.get('logging', {}) or {}

    engine = ocr.get('engine', Settings.engine)
    if engine not in SUPPORTED_ENGINES:
        raise ConfigError(f"OCR engine {engine} not supported")

    timeout_s = float(ocr.get('timeout_s', Settings.timeout_s))
    if timeout_s <= 0:
        raise ConfigError("ocr.timeout_s must be positive")

    return Settings(
        engine=engine,
        lang=ocr.get('lang', Settings.lang),
        use_angle_cls=bool(ocr.get('use_angle_cls', Settings.use_angle_cls)),
        timeout_s=timeout_s,
        audit_log=logging_cfg.get('audit_log', Settings.audit_log),
        log_level=logging_cfg.get('level', Settings.log_level),
    )
