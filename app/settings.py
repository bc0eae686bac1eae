from constants import *
import copy
import yaml
import os

import logging

# Retrieve main logger
logger = logging.getLogger("main")


# Cache variable
_cached_settings = None


def _merge_defaults(settings):
    # Deep merge with defaults so new sections are always present
    merged_settings = copy.deepcopy(DEFAULT_SETTINGS)
    for section, values in settings.items():
        if isinstance(values, dict) and section in merged_settings and isinstance(merged_settings[section], dict):
            merged_settings[section].update(values)
        else:
            merged_settings[section] = values
    return merged_settings


def load_settings(force=False, config_file=None):
    global _cached_settings

    if _cached_settings and not force:
        return _cached_settings

    config_file = config_file or CONFIG_FILE
    if os.path.exists(config_file):
        logger.debug(f"Reading configuration file: {config_file}")
        with open(config_file, "r") as yaml_file:
            settings = yaml.safe_load(yaml_file) or {}
        settings = _merge_defaults(settings)
    else:
        settings = copy.deepcopy(DEFAULT_SETTINGS)
        try:
            os.makedirs(os.path.dirname(config_file), exist_ok=True)
            with open(config_file, "w") as yaml_file:
                yaml.dump(settings, yaml_file)
        except OSError as e:
            logger.warning(f"Could not write default configuration to {config_file}: {e}")

    _cached_settings = settings
    return settings


def reload_conf():
    global _cached_settings
    _cached_settings = None
    return load_settings(force=True)


def verify_settings(section, data):
    success = True
    errors = []
    if section == "server":
        base_url = data.get("base_url", "")
        if not isinstance(base_url, str) or not base_url.startswith(("http://", "https://")):
            success = False
            errors.append({"path": "server/base_url", "error": f"Base URL {base_url} must start with http:// or https://."})
        timeout = data.get("timeout", DEFAULT_SETTINGS["server"]["timeout"])
        if not isinstance(timeout, (int, float)) or isinstance(timeout, bool) or timeout <= 0:
            success = False
            errors.append({"path": "server/timeout", "error": f"Timeout {timeout} must be a positive number."})
    elif section == "cache":
        dismiss_after = data.get("dismiss_after", SUCCESS_DISMISS_SECONDS)
        if not isinstance(dismiss_after, (int, float)) or isinstance(dismiss_after, bool) or dismiss_after < 0:
            success = False
            errors.append({"path": "cache/dismiss_after", "error": f"Delay {dismiss_after} must be zero or more seconds."})
    return success, errors
