import yaml
import logging
from pathlib import Path

def load_config(settings_path: str = "config/settings.yaml", override_path: str = "config/local.yaml") -> dict:
    """
    Load settings.yaml and merge with a per-deployment override file if it exists.
    """
    # 1. Load Base Settings
    config = {}
    base_path = Path(settings_path)
    if base_path.exists():
        with open(base_path, 'r', encoding='utf-8') as f:
            config = yaml.safe_load(f) or {}
    else:
        logging.warning(f"Settings file not found at {base_path}")

    # 2. Load Overrides
    local_path = Path(override_path) if override_path else None
    if local_path and local_path.exists():
        logging.info(f"Loading overrides from {local_path}")
        with open(local_path, 'r', encoding='utf-8') as f:
            overrides = yaml.safe_load(f) or {}

        # 3. Merge (one level deep, per section)
        for section in ['admission', 'paths']:
            if section in overrides:
                target = config.setdefault(section, {}) or {}
                target.update(overrides[section] or {})
                config[section] = target

    return config
