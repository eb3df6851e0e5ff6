"""Logging setup for processes hosting a proof verifier."""

import io
import logging
from importlib import resources
from logging.config import dictConfig, fileConfig
from typing import IO, Optional

import yaml
from pythonjsonlogger import jsonlogger

from .base import BaseSettings

DEFAULT_LOGGING_CONFIG_PATH_INI = "aries_cl_verifier.config:default_logging_config.ini"
JSON_LOG_FORMAT = (
    "%(asctime)s %(name)s %(levelname)s %(pathname)s:%(lineno)d %(message)s"
)
YAML_SUFFIXES = (".yml", ".yaml")


def load_resource(path: str, encoding: str = None) -> Optional[IO]:
    """
    Open a file from the filesystem or, for `package:file` paths, a package.

    Returns None when the file or package cannot be found. The stream is
    binary unless an encoding is given.
    """
    if ":" not in path:
        try:
            return open(path, encoding=encoding)
        except IOError:
            return None

    package, name = path.rsplit(":", 1)
    try:
        stream = resources.files(package).joinpath(name).open("rb")
    except (IOError, ModuleNotFoundError):
        return None
    return io.TextIOWrapper(stream, encoding=encoding) if encoding else stream


class LoggingConfigurator:
    """Apply an ini or yaml logging config, plus optional level and json file."""

    default_config_path_ini = DEFAULT_LOGGING_CONFIG_PATH_INI

    @classmethod
    def configure(
        cls,
        log_config_path: str = None,
        log_level: str = None,
        log_file: str = None,
    ):
        """
        Configure the root logger.

        Args:
            log_config_path: ini or yaml config, the packaged ini if not given
            log_level: level name overriding the config's root level
            log_file: file receiving json formatted records

        """
        cls._apply_config(log_config_path or cls.default_config_path_ini)

        if log_file:
            handler = logging.FileHandler(log_file, encoding="utf-8")
            handler.setFormatter(jsonlogger.JsonFormatter(JSON_LOG_FORMAT))
            logging.root.addHandler(handler)

        if log_level:
            logging.root.setLevel(log_level.upper())

    @classmethod
    def configure_from_settings(cls, settings: BaseSettings):
        """Configure from the `log.config`, `log.level` and `log.file` settings."""
        cls.configure(
            settings.get_value("log.config"),
            settings.get_value("log.level"),
            settings.get_value("log.file"),
        )

    @classmethod
    def _apply_config(cls, path: str):
        if path.endswith(YAML_SUFFIXES):
            with open(path, "r") as stream:
                dictConfig(yaml.safe_load(stream))
            return

        stream = load_resource(path, "utf-8")
        if not stream:
            logging.basicConfig(level=logging.WARNING)
            logging.root.warning("Logging config file not found: %s", path)
            return
        with stream:
            fileConfig(stream, disable_existing_loggers=False)
