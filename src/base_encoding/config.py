import json
import os
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Dict, Optional

from .engine import BaseEncoding
from .errors import InvalidConfigurationError
from .registry import custom_encoding, lookup, normalize_name, registry
from .utils import unescape

CONFIG_PATH = Path.home() / ".base_encoding.json"

ENV_MAPPING: Dict[str, str] = {
    "variant": "BASE_ENCODING_VARIANT",
    "alphabet": "BASE_ENCODING_ALPHABET",
    "separator": "BASE_ENCODING_SEPARATOR",
    "interval": "BASE_ENCODING_INTERVAL",
    "omit_padding": "BASE_ENCODING_NO_PADDING",
    "ignore_unknown": "BASE_ENCODING_IGNORE_UNKNOWN",
    "history": "BASE_ENCODING_NO_HISTORY",
}

_TRUE_VALUES = {"1", "true", "yes", "on"}


@dataclass
class CodecConfig:
    variant: str = "base64"
    alphabet: str = ""
    case_sensitive: bool = True
    omit_padding: bool = False
    ignore_unknown: bool = False
    separator: str = ""
    interval: int = 0
    history: bool = True

    def to_dict(self) -> Dict[str, object]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, object]) -> "CodecConfig":
        values = {}
        for f in fields(cls):
            if f.name not in data:
                continue
            value = data[f.name]
            # Exact match: bool is an int subclass and must not stand in for one.
            if type(value) is not type(f.default):
                raise InvalidConfigurationError(
                    f"Setting {f.name!r} must be {type(f.default).__name__}, got {value!r}"
                )
            values[f.name] = value
        return cls(**values)

    def build(self) -> BaseEncoding:
        """Return the encoding these settings describe."""
        if self.alphabet:
            encoding = custom_encoding(self.alphabet, case_sensitive=self.case_sensitive)
        else:
            encoding = lookup(self.variant)
        if self.omit_padding:
            encoding = encoding.without_padding()
        if self.ignore_unknown:
            encoding = encoding.ignore_unknown_characters()
        if self.separator:
            encoding = encoding.with_separator(self.separator, self.interval)
        return encoding


def _merge_env(config: CodecConfig) -> CodecConfig:
    defaults = CodecConfig()
    for field_name, env_var in ENV_MAPPING.items():
        env_val = os.getenv(env_var, "")
        if not env_val or getattr(config, field_name) != getattr(defaults, field_name):
            continue
        if field_name == "interval":
            try:
                config.interval = int(env_val)
            except ValueError:
                raise InvalidConfigurationError(f"{env_var} must be an integer, got {env_val!r}") from None
        elif field_name == "history":
            config.history = env_val.strip().lower() not in _TRUE_VALUES
        elif field_name == "separator":
            config.separator = unescape(env_val)
        elif field_name in ("omit_padding", "ignore_unknown"):
            setattr(config, field_name, env_val.strip().lower() in _TRUE_VALUES)
        else:
            setattr(config, field_name, env_val)
    return config


def load_config(path: Optional[Path] = None) -> CodecConfig:
    target = path or CONFIG_PATH
    config = CodecConfig()
    if target.exists():
        try:
            data = json.loads(target.read_text(encoding="utf-8"))
            if isinstance(data, dict):
                config = CodecConfig.from_dict(data)
        except (OSError, ValueError):
            # Fall back to defaults/env if file malformed or mistyped.
            config = CodecConfig()
    if normalize_name(config.variant) not in registry():
        config.variant = CodecConfig.variant
    return _merge_env(config)


def save_config(config: CodecConfig, path: Optional[Path] = None) -> None:
    target = path or CONFIG_PATH
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(json.dumps(config.to_dict(), ensure_ascii=False, indent=2), encoding="utf-8")
