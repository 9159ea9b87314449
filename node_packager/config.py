from __future__ import annotations

import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from .errors import InvalidInput
from .lib.fsutil import file_exists
from .lib.npm import DEFAULT_REGISTRY

DEFAULT_AUDIT_LEVEL = "high"
AUDIT_LEVELS = ("low", "moderate", "high", "critical")
ARCHIVE_EXTENSION = ".tgz"

ENV_REGISTRY = "NODE_PACKAGER_REGISTRY"
ENV_PROXY = "NODE_PACKAGER_PROXY"
ENV_PROXY_FALLBACKS = ("npm_config_proxy", "HTTPS_PROXY", "https_proxy")


@dataclass(frozen=True)
class PackagingRequest:
    library_name: str
    src_dir: Optional[str] = None
    registry: str = DEFAULT_REGISTRY
    proxy: Optional[str] = None
    audit_level: str = DEFAULT_AUDIT_LEVEL
    audit_retries: int = 0

    verbose: bool = False
    no_audit: bool = False
    audit_fix: bool = False
    keep_tmp: bool = False

    def __post_init__(self) -> None:
        # Blank values fall back to the defaults; src_dir may carry $VARS.
        object.__setattr__(self, "library_name", (self.library_name or "").strip())
        object.__setattr__(self, "registry", self.registry or DEFAULT_REGISTRY)
        object.__setattr__(self, "audit_level", (self.audit_level or DEFAULT_AUDIT_LEVEL).lower())
        object.__setattr__(self, "proxy", self.proxy or None)
        src = os.path.expandvars(self.src_dir) if self.src_dir else None
        object.__setattr__(self, "src_dir", src or None)

    @property
    def has_src_dir(self) -> bool:
        return bool(self.src_dir)

    @property
    def library_name_without_version(self) -> str:
        """'foo@1.0' -> 'foo', '@scope/foo@1.0' -> '@scope/foo', '@scope/foo' unchanged."""
        idx = self.library_name.rfind("@")
        if idx <= 0:
            return self.library_name
        return self.library_name[:idx]

    @property
    def tarball_prefix(self) -> str:
        """npm pack names scoped archives 'scope-name-<version>.tgz'."""
        return self.library_name_without_version.replace("/", "-").replace("@", "")

    def validate(self) -> "PackagingRequest":
        if not self.library_name:
            raise InvalidInput("library not defined")
        if self.has_src_dir and not file_exists(self.src_dir):
            raise InvalidInput(f"library source directory not found: {self.src_dir}")
        if self.audit_level not in AUDIT_LEVELS:
            raise InvalidInput(
                f"invalid audit level '{self.audit_level}': expected one of {', '.join(AUDIT_LEVELS)}"
            )
        if self.audit_retries < 0:
            raise InvalidInput("audit retries must not be negative")
        return self


_FIELD_NAMES = {f.name for f in fields(PackagingRequest)}
_CONFIG_ALIASES = {"src": "src_dir", "library": "library_name"}
_BOOL_FIELDS = {"verbose", "no_audit", "audit_fix", "keep_tmp"}
_INT_FIELDS = {"audit_retries"}
_TRUE_WORDS = {"true", "yes", "on", "1"}
_FALSE_WORDS = {"false", "no", "off", "0"}


def load_config_file(path: str) -> Dict[str, Any]:
    """Load defaults for a request from a YAML file."""
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(path)

    if p.suffix.lower() not in {".yaml", ".yml"}:
        raise ValueError("config file must be YAML")

    try:
        import yaml  # type: ignore
    except Exception as e:  # pragma: no cover
        raise RuntimeError("PyYAML is required to read the config file") from e

    try:
        raw = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ValueError(f"invalid YAML in {path}: {e}") from e
    if not isinstance(raw, dict):
        raise ValueError(f"{path} must contain a mapping/object")

    out: Dict[str, Any] = {}
    for key, value in raw.items():
        name = str(key).replace("-", "_")
        name = _CONFIG_ALIASES.get(name, name)
        if name not in _FIELD_NAMES:
            raise ValueError(f"Unknown config key in {path}: {key}")
        out[name] = value
    return out


def _coerce(name: str, value: Any) -> Any:
    """Bring a config/override value to the field's type; YAML may quote anything."""
    if value is None:
        return None

    if name in _BOOL_FIELDS:
        if isinstance(value, bool):
            return value
        word = str(value).strip().lower()
        if word in _TRUE_WORDS:
            return True
        if word in _FALSE_WORDS:
            return False
        raise InvalidInput(f"{name} must be true or false, got {value!r}")

    if name in _INT_FIELDS:
        if isinstance(value, int) and not isinstance(value, bool):
            return value
        if isinstance(value, str) and value.strip().isdigit():
            return int(value.strip())
        raise InvalidInput(f"{name} must be a whole number, got {value!r}")

    if not isinstance(value, str):
        raise InvalidInput(f"{name} must be a string, got {value!r}")
    return value


def env_defaults(environ: Mapping[str, str] | None = None) -> Dict[str, Any]:
    env = os.environ if environ is None else environ
    out: Dict[str, Any] = {}
    if env.get(ENV_REGISTRY):
        out["registry"] = env[ENV_REGISTRY]
    proxy = env.get(ENV_PROXY) or next((env[k] for k in ENV_PROXY_FALLBACKS if env.get(k)), None)
    if proxy:
        out["proxy"] = proxy
    return out


def build_request(
    library_name: str,
    *,
    overrides: Mapping[str, Any] | None = None,
    config_path: str | None = None,
    environ: Mapping[str, str] | None = None,
) -> PackagingRequest:
    """Merge defaults < environment < config file < explicit overrides.

    Overrides set to None are treated as "not given".
    """

    values: Dict[str, Any] = {}
    values.update(env_defaults(environ))
    if config_path:
        values.update(load_config_file(config_path))
    for key, value in (overrides or {}).items():
        if value is not None:
            values[key] = value
    values = {key: _coerce(key, value) for key, value in values.items()}

    configured_name = values.pop("library_name", None)
    request = PackagingRequest(library_name=library_name or configured_name or "")
    return replace(request, **values)
