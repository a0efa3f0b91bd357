import math
import os

import yaml

from .debuglog import debug_log

CONFIG_DIR = os.path.expanduser("~/.config/sockwatch")
CONFIG_PATH = os.path.join(CONFIG_DIR, "config.yaml")

# psutil.net_connections kinds that only yield TCP/UDP sockets
CONNECTION_KINDS = ("inet", "inet4", "inet6", "tcp", "tcp4", "tcp6", "udp", "udp4", "udp6")

DEFAULT_CONFIG = {
    "refresh_interval": 2.0,   # seconds between refresh ticks
    "poll_timeout_ms": 250,    # max wait for one key press
    "kind": "inet",
}

CONFIG = dict(DEFAULT_CONFIG)


class ConfigError(Exception):
    pass


def load_config_file(path):
    """Read a YAML config file. Missing file -> empty dict."""
    if not os.path.exists(path):
        return {}
    try:
        with open(path, "r") as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"cannot read {path}: {e}") from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"{path}: expected a mapping at top level")
    unknown = sorted(set(data) - set(DEFAULT_CONFIG))
    if unknown:
        debug_log(f"CONFIG: Ignoring unknown keys in {path}: {', '.join(unknown)}")
    return {k: v for k, v in data.items() if k in DEFAULT_CONFIG}


def validate_config(cfg):
    try:
        interval = float(cfg["refresh_interval"])
        poll_ms = int(cfg["poll_timeout_ms"])
    except (TypeError, ValueError, OverflowError) as e:
        raise ConfigError(f"invalid timing value: {e}") from e
    if not math.isfinite(interval * 1000) or interval <= 0:
        raise ConfigError("refresh_interval must be a positive finite number")
    if poll_ms <= 0:
        raise ConfigError("poll_timeout_ms must be positive")
    if cfg["kind"] not in CONNECTION_KINDS:
        raise ConfigError(f"kind must be one of: {', '.join(CONNECTION_KINDS)}")

    # keys must stay responsive while waiting for the next refresh
    interval_ms = int(interval * 1000)
    if poll_ms >= interval_ms:
        clamped = max(1, interval_ms // 2)
        debug_log(f"CONFIG: poll_timeout_ms {poll_ms} >= refresh interval, clamped to {clamped}")
        poll_ms = clamped

    cfg["refresh_interval"] = interval
    cfg["poll_timeout_ms"] = poll_ms
    return cfg


def init_config(path=None, overrides=None):
    """Build CONFIG from defaults, the config file and command line overrides."""
    path = path or CONFIG_PATH
    cfg = dict(DEFAULT_CONFIG)
    cfg.update(load_config_file(path))
    if overrides:
        cfg.update({k: v for k, v in overrides.items() if v is not None})
    validate_config(cfg)
    CONFIG.clear()
    CONFIG.update(cfg)
    debug_log(f"CONFIG: interval={cfg['refresh_interval']}s poll={cfg['poll_timeout_ms']}ms kind={cfg['kind']}")
    return CONFIG
