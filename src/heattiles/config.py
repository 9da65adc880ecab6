"""Configuration management for heattiles.

This module handles loading and managing configuration settings using
Dynaconf. Settings are loaded from multiple locations in order of
increasing priority:

1. Global settings (/etc/heattiles/)
2. User settings (~/.config/heattiles/)
3. Current directory settings (./)
4. Environment variable specified file (HEATTILES_SETTINGS_FILE_FOR_DYNACONF)

Recognised keys are ``tile_size`` (int or ``[width, height]``, read through
:func:`tile_size`) and ``verbose`` (enables ``heattiles.utils.vprint``).

Attributes
----------
settings : Dynaconf
    The Dynaconf settings object with loaded configuration.
"""
import os
import pathlib

from dynaconf import Dynaconf

USER_DIR = pathlib.Path("~/.config/heattiles").expanduser()
GLOB_DIR = pathlib.Path("/etc/heattiles/")
CURR_DIR = pathlib.Path("./").absolute()
settings_files = [
    GLOB_DIR / "settings.toml",
    GLOB_DIR / ".secrets.toml",
    USER_DIR / "settings.toml",
    USER_DIR / ".secrets.toml",
    CURR_DIR / "settings.toml",
    CURR_DIR / ".secrets.toml"
    ]
extra_file = os.getenv("HEATTILES_SETTINGS_FILE_FOR_DYNACONF")
if extra_file:
    settings_files.append(pathlib.Path(extra_file).absolute())

settings = Dynaconf(
    merge_enabled=True,
    envvar_prefix="HEATTILES",
    settings_files=settings_files,
    environments=True,
    load_dotenv=True,
)


def change_env(new_env):
    """Change the active Dynaconf environment.

    Parameters
    ----------
    new_env : str
        The environment name to switch to (e.g., 'development', 'production').
    """
    settings.setenv(new_env)
    settings.reload()


def tile_size():
    """Return the configured tile size as a ``(width, height)`` tuple.

    The ``tile_size`` setting may be a single int (square tiles) or a
    two-element list. Defaults to 256x256.
    """
    value = settings.get("tile_size", 256)
    if isinstance(value, (list, tuple)):
        if len(value) != 2:
            raise ValueError("tile_size must be an int or a [width, height] pair")
        return int(value[0]), int(value[1])
    return int(value), int(value)
