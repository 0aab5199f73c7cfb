import json
import logging
import os

from dotenv import load_dotenv
from typing import Any

from iconkit.icon_factory import DEFAULT_SET, IconFactory

logger = logging.getLogger(__name__)


class Config:
    # Base path for the package directory
    BASE_DIR = os.path.dirname(os.path.abspath(__file__))

    # Optional icon configuration file (can be overridden via env or CLI)
    config_file = os.path.join(BASE_DIR, "config", "icons.json")

    # Bundled icons, used as the default set when no config file is present
    icons_dir = os.path.join(BASE_DIR, "static", "icons")

    def __init__(self):
        load_dotenv(dotenv_path=self.get_env_file_path(), override=False)
        self.config_file = self._determine_config_path()
        self.config = self.read_config()

    def _determine_config_path(self):
        """Determine which icon config file to load, if any.

        Precedence:
        1. ICONKIT_CONFIG_FILE env var if it exists
        2. Explicit class attribute override (e.g., set by CLI) if it exists
        3. None, meaning the built-in defaults are used
        """
        env_file = os.getenv("ICONKIT_CONFIG_FILE")
        if env_file and os.path.isfile(env_file):
            logger.info(f"Using config file from ICONKIT_CONFIG_FILE: {env_file}")
            return env_file
        if env_file:
            logger.warning("ICONKIT_CONFIG_FILE points to a missing file: %s", env_file)

        class_override = getattr(type(self), "config_file", None)
        if class_override and os.path.isfile(class_override):
            logger.info(f"Using config file: {class_override}")
            return class_override

        logger.info("No icon config file found, using bundled icon set")
        return None

    def default_config(self) -> dict[str, Any]:
        return {
            "default_class": "",
            "default_attributes": {},
            "fallback": "",
            "sets": {
                DEFAULT_SET: {"paths": [self.icons_dir], "prefix": "icon"},
            },
        }

    def read_config(self):
        """Read the icon config JSON, apply env overrides and return it as a dictionary."""
        config = self.default_config()
        if self.config_file:
            logger.debug(f"Reading icon config from {self.config_file}")
            with open(self.config_file) as f:
                loaded = json.load(f)
            if not isinstance(loaded, dict):
                raise ValueError(f"Icon config must be a JSON object: {self.config_file}")
            config.update(loaded)
            config["sets"] = self._resolve_set_paths(config.get("sets") or {})

        env_class = os.getenv("ICONKIT_DEFAULT_CLASS")
        if env_class is not None:
            config["default_class"] = env_class.strip()
        env_fallback = os.getenv("ICONKIT_FALLBACK")
        if env_fallback is not None:
            config["fallback"] = env_fallback.strip()

        logger.debug("Loaded icon config with sets: %s", ", ".join(config["sets"]) or "<none>")
        return config

    def _resolve_set_paths(self, sets: dict[str, Any]) -> dict[str, Any]:
        base = os.path.dirname(os.path.abspath(self.config_file))
        resolved: dict[str, Any] = {}
        for name, options in sets.items():
            options = dict(options)
            paths = options.get("paths") or options.get("path") or []
            if isinstance(paths, str):
                paths = [paths]
            options["paths"] = [p if os.path.isabs(p) else os.path.join(base, p) for p in paths]
            options.pop("path", None)
            resolved[name] = options
        return resolved

    def get_config(self, key=None, default=None):
        """Gets the value of a specific configuration key or returns the entire config if none provided."""
        if key is not None:
            return self.config.get(key, default)
        return self.config

    def get_sets(self) -> dict[str, Any]:
        return self.config.get("sets", {})

    def get_env_file_path(self):
        """Return absolute path to the .env file.

        PROJECT_DIR wins when set; otherwise the parent of the package directory.
        """
        project_dir = os.getenv("PROJECT_DIR")
        if not project_dir:
            project_dir = os.path.abspath(os.path.join(self.BASE_DIR, ".."))
        return os.path.join(project_dir, ".env")

    def build_factory(self) -> IconFactory:
        """Create an IconFactory with every configured set registered."""
        factory = IconFactory(
            default_class=self.get_config("default_class", ""),
            default_attributes=self.get_config("default_attributes", {}),
            fallback=self.get_config("fallback", ""),
        )
        for name, options in self.get_sets().items():
            factory.add(
                name,
                paths=options.get("paths", []),
                prefix=options.get("prefix", ""),
                class_=options.get("class", ""),
                attributes=options.get("attributes"),
                fallback=options.get("fallback", ""),
            )
        return factory
