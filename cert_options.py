#!/usr/bin/env python3
"""
Certificate Request Options

Defines the options that drive CSR generation, the supported EC signature
algorithm and curves, and the JSON config file that supplies defaults.
"""

import json
import os
from dataclasses import dataclass, field, fields
from typing import Optional, Tuple

# Minimum RSA key size accepted when generating a CSR key
MINIMUM_RSA_KEY_SIZE = 2048

ECDSA_SIG_ALG = "ECDSA"
P256_CURVE = "P256"
P384_CURVE = "P384"

DEFAULT_CONFIG_FILE = "csr_config.json"
DEFAULT_SUPPORT_DIR = "support_files"


def split_hosts(host):
    """Turn a comma separated string or an iterable of hosts into a tuple."""
    if not host:
        return ()
    if isinstance(host, str):
        host = host.split(",")
    return tuple(h.strip() for h in host)


@dataclass(frozen=True)
class CertOptions:
    """Properties of the certificate request to generate."""
    org: str = ""
    host: Tuple[str, ...] = field(default_factory=tuple)
    rsa_key_size: int = MINIMUM_RSA_KEY_SIZE
    ec_sig_alg: Optional[str] = None
    ec_curve: Optional[str] = None
    is_dual_use: bool = False
    pkcs8_key: bool = False

    def __post_init__(self):
        object.__setattr__(self, "host", split_hosts(self.host))

    @classmethod
    def from_config(cls, conf_dict, **overrides):
        """
        Build options from a config dict, letting non-None overrides win.

        Unknown config keys are ignored so the config file can carry
        settings for other tools.
        """
        names = {f.name for f in fields(cls)}
        values = {k: _config_value(k, v) for k, v in conf_dict.items()
                  if k in names and v is not None}
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)


_STRING_OPTIONS = ("org", "ec_sig_alg", "ec_curve")
_BOOL_OPTIONS = ("is_dual_use", "pkcs8_key")


def _config_value(name, value):
    """Check the type of a config file value, converting numeric strings."""
    if name == "rsa_key_size":
        if isinstance(value, bool):
            raise ValueError(f"Invalid config value for {name}: {value!r}")
        try:
            return int(value)
        except (TypeError, ValueError):
            raise ValueError(f"Invalid config value for {name}: {value!r}") from None
    if name in _BOOL_OPTIONS and not isinstance(value, bool):
        raise ValueError(f"Invalid config value for {name}: expected true or false, got {value!r}")
    if name in _STRING_OPTIONS and not isinstance(value, str):
        raise ValueError(f"Invalid config value for {name}: expected a string, got {value!r}")
    if name == "host":
        if isinstance(value, str):
            return value
        if not isinstance(value, list) or not all(isinstance(h, str) for h in value):
            raise ValueError(f"Invalid config value for {name}: expected a list of strings")
    return value


def load_config(path):
    """Read the JSON config file; a missing file means no defaults."""
    if not os.path.exists(path):
        return {}
    with open(path) as f:
        try:
            conf_dict = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid config file {path}: {e}") from e
    if not isinstance(conf_dict, dict):
        raise ValueError(f"Invalid config file {path}: expected a JSON object")
    return conf_dict
