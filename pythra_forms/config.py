# pythra_forms/config.py
from __future__ import annotations
import importlib
import logging
from pathlib import Path
from typing import Any, Dict, Optional
import yaml

logger = logging.getLogger(__name__)


class Config:
    """
    Singleton config loader that supports:
      - an embedded config module (default name: _embedded_forms_config, attribute: CONFIG)
      - a fallback YAML file (forms.yaml)

    Usage:
        cfg = Config()  # prefers embedded if available, else loads forms.yaml
        fmt = cfg.get_nested("datepicker.format", "YYYY-MM-DD")
        defaults = cfg.section("datepicker")
        cfg.reload(config_file="other.yaml")

    Recognised sections:
      datepicker: format, disablePast, hideOffset, popupPosition
      popup: displayPopup, hidePopup

    Parameters:
      config_file: path to YAML config (relative or absolute).
      prefer_embedded: when True (default) try embedded module first, otherwise check file first.
      embedded_module_name: module name to import when looking for embedded config.
    """

    _instance: Optional["Config"] = None

    def __new__(cls, *args, **kwargs):
        if cls._instance is None:
            cls._instance = super(Config, cls).__new__(cls)
        return cls._instance

    def __init__(
        self,
        config_file: str = "forms.yaml",
        prefer_embedded: bool = True,
        embedded_module_name: str = "_embedded_forms_config",
    ):
        # initialize only once
        if getattr(self, "_initialized", False):
            return

        self._initialized = True
        self.config_file_arg = config_file
        self.prefer_embedded = bool(prefer_embedded)
        self.embedded_module_name = embedded_module_name

        self._config: Dict[str, Any] = {}
        self._source: Optional[str] = None  # 'embedded' or 'file' or None
        self._resolved_config_path: Optional[Path] = self._resolve_config_path(config_file)

        self.reload()

    # ----- public API -----
    def reload(self, prefer_embedded: Optional[bool] = None, config_file: Optional[str] = None) -> None:
        """
        Reload the configuration. ``prefer_embedded`` overrides the instance
        preference for this reload only; ``config_file`` switches the YAML file
        for this and later reloads.
        """
        if config_file is not None:
            self.config_file_arg = config_file
            self._resolved_config_path = self._resolve_config_path(config_file)

        prefer = self.prefer_embedded if prefer_embedded is None else bool(prefer_embedded)

        if prefer:
            loaded = self._try_load_embedded() or self._try_load_file()
        else:
            loaded = self._try_load_file() or self._try_load_embedded()

        if not loaded:
            self._source = None
            self._config = {}

    def as_dict(self) -> Dict[str, Any]:
        """Return the loaded configuration as a dict (may be empty)."""
        return dict(self._config)

    def get(self, key: str, default: Any = None) -> Any:
        """Shallow lookup in the top-level config dict."""
        return self._config.get(key, default)

    def get_nested(self, path: str, default: Any = None, sep: str = ".") -> Any:
        """
        Lookup nested keys using dot-path (e.g. "datepicker.format").
        Returns default if any step is missing.
        """
        cur = self._config
        if not path:
            return default
        for part in path.split(sep):
            if not isinstance(cur, dict):
                return default
            if part in cur:
                cur = cur[part]
            else:
                return default
        return cur

    def section(self, name: str) -> Dict[str, Any]:
        """Return a top-level mapping section, or an empty dict if absent or malformed."""
        value = self._config.get(name)
        if value is None:
            return {}
        if not isinstance(value, dict):
            logger.warning("Config section '%s' should be a mapping, got %s; ignoring it.", name, type(value).__name__)
            return {}
        return dict(value)

    @property
    def is_embedded(self) -> bool:
        """True if the currently loaded config came from the embedded module."""
        return self._source == "embedded"

    @property
    def source(self) -> Optional[str]:
        """Return 'embedded'|'file'|None depending on where config came from."""
        return self._source

    @property
    def resolved_config_path(self) -> Optional[Path]:
        """If a filesystem config was resolved, return its Path, otherwise None."""
        return self._resolved_config_path

    # ----- internal helpers -----
    def _resolve_config_path(self, config_file: str) -> Optional[Path]:
        """
        Resolve the YAML config path:
          1. config_file is absolute and exists
          2. config_file relative to cwd exists
          3. config_file relative to the package directory exists
        """
        candidate = Path(config_file)
        if candidate.is_absolute():
            return candidate.resolve() if candidate.exists() else None

        in_cwd = (Path.cwd() / config_file).resolve()
        if in_cwd.exists():
            return in_cwd

        in_package = (Path(__file__).resolve().parent / config_file).resolve()
        if in_package.exists():
            return in_package

        return None

    def _try_load_embedded(self) -> bool:
        """
        Try to import the embedded module and fetch CONFIG. Returns True on success.
        """
        try:
            module = importlib.import_module(self.embedded_module_name)
        except ModuleNotFoundError:
            return False
        cfg = getattr(module, "CONFIG", None)
        if isinstance(cfg, dict):
            self._config = dict(cfg)
            self._source = "embedded"
            logger.debug("Loaded embedded config from %s", self.embedded_module_name)
            return True
        logger.warning("Embedded config module %s has no CONFIG mapping.", self.embedded_module_name)
        return False

    def _try_load_file(self) -> bool:
        """
        Try to load YAML file from resolved path. Returns True on success.
        """
        if not self._resolved_config_path:
            return False
        try:
            with self._resolved_config_path.open("r", encoding="utf-8") as fh:
                data = yaml.safe_load(fh)
        except (OSError, yaml.YAMLError) as e:
            logger.warning("Could not read config file %s: %s", self._resolved_config_path, e)
            return False
        if data is None:
            data = {}
        if isinstance(data, dict):
            self._config = data
        else:
            # YAML parsed but not a mapping -> store raw under a key
            self._config = {"__root__": data}
        self._source = "file"
        logger.debug("Loaded config file %s", self._resolved_config_path)
        return True


def get_config(*args, **kwargs) -> Config:
    """
    Convenience factory that returns the singleton Config instance.
    Arguments forwarded to Config() only on the first call.
    """
    return Config(*args, **kwargs)
