import os
import yaml

from Modules.Logger import Logger

# Determine the root directory of the study tracker project
ROOT_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
SETTINGS_PATH = os.path.join(ROOT_DIR, "User", "Settings", "study_settings.yml")

DEFAULTS = {
    "host": "127.0.0.1",
    "port": 5001,
    "data_dir": os.path.join("User", "Data"),
    "log_file": os.path.join("Logs", "study.log"),
    "log_requests": True,
}


def _resolve(path):
    """Relative paths are taken from the project root."""
    path = os.path.expanduser(str(path))
    if os.path.isabs(path):
        return path
    return os.path.join(ROOT_DIR, path)


def _parse_port(value, fallback):
    try:
        port = int(value)
    except (TypeError, ValueError):
        return fallback
    if port < 0 or port > 65535:
        return fallback
    return port


def _read_settings_file(path, warnings):
    if not os.path.exists(path):
        return {}
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        warnings.append(f"Could not read settings file {path}: {e}")
        return {}
    if not isinstance(data, dict):
        warnings.append(f"Settings file {path} is not a map; using defaults")
        return {}
    return data


def load_settings(path=None, environ=None):
    """
    Builds the server settings from defaults, the optional YAML settings
    file, then STUDY_DASH_HOST / STUDY_DASH_PORT / STUDY_DATA_DIR.

    Problems found on the way are kept in settings["warnings"] until
    configure_logging() knows which log file to write them to.
    """
    environ = os.environ if environ is None else environ
    settings = dict(DEFAULTS)
    warnings = []

    file_data = _read_settings_file(path or SETTINGS_PATH, warnings)
    for key in DEFAULTS:
        if file_data.get(key) is not None:
            settings[key] = file_data[key]

    if environ.get("STUDY_DASH_HOST"):
        settings["host"] = environ["STUDY_DASH_HOST"]
    if environ.get("STUDY_DASH_PORT"):
        settings["port"] = environ["STUDY_DASH_PORT"]
    if environ.get("STUDY_DATA_DIR"):
        settings["data_dir"] = environ["STUDY_DATA_DIR"]

    port = _parse_port(settings["port"], None)
    if port is None:
        warnings.append(f"Invalid port {settings['port']!r}; using {DEFAULTS['port']}")
        port = DEFAULTS["port"]

    settings["host"] = str(settings["host"])
    settings["port"] = port
    settings["data_dir"] = _resolve(settings["data_dir"])
    settings["log_file"] = _resolve(settings["log_file"])
    settings["log_requests"] = bool(settings["log_requests"])
    settings["warnings"] = warnings
    return settings


def configure_logging(settings):
    """Points the Logger at the configured file, then flushes pending warnings."""
    Logger.configure(settings["log_file"])
    for message in settings.get("warnings") or []:
        Logger.warn(message)
