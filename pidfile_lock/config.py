# SPDX-License-Identifier: LGPL-2.1-or-later
# vim:ts=4:sw=4:et
#
# Copyright (c) 2024 The pidfile-lock authors
import configparser
import logging
import os
from typing import Optional

from pidfile_lock.constants import BASE_CONFIG_PATH, CONFIG_ENV, USER_CONFIG_PATH

__all__ = [
    'get_config',
    'reload_config',
]

base_config_path = os.environ.get(CONFIG_ENV, BASE_CONFIG_PATH)
user_config_path: Optional[str] = None

config: configparser.ConfigParser

logger = logging.getLogger(__name__)


class ConfigSection:
    def __init__(self, name: str, *, defaults: Optional[dict[str, str]] = None):
        self.name = name
        self._defaults = defaults or {}

    def __getitem__(self, name: str) -> str:
        if config.has_section(self.name) and config.has_option(self.name, name):
            return config.get(self.name, name)
        if name in self._defaults:
            return self._defaults[name]
        raise KeyError(name)

    def __contains__(self, name: str) -> bool:
        return config.has_section(self.name) and config.has_option(self.name, name)

    def get(self, name: str, default: Optional[str] = None) -> Optional[str]:
        try:
            return self[name]
        except KeyError:
            return default


def get_config(mod: str, defaults: Optional[dict[str, str]] = None) -> ConfigSection:
    if mod == 'pidfile_lock':
        return ConfigSection('pfl', defaults=defaults)
    if not mod.startswith('pidfile_lock.'):
        raise KeyError(mod)
    return ConfigSection(mod.split('.', 1)[1], defaults=defaults)


def reload_config() -> None:
    global config
    global user_config_path
    config = configparser.ConfigParser(interpolation=configparser.ExtendedInterpolation())

    try:
        with open(base_config_path) as f:
            config.read_file(f, source=base_config_path)
    except FileNotFoundError:
        logger.debug(f'No config file found at {base_config_path}')
    except OSError:
        logger.error("Couldn't open base configuration file")

    if config.has_section('pfl') and config.has_option('pfl', 'user-config'):
        user_config_path = config.get('pfl', 'user-config')
    else:
        user_config_path = os.path.expanduser(USER_CONFIG_PATH)

    try:
        with open(user_config_path) as f:
            config.read_file(f, source=user_config_path)
    except FileNotFoundError:
        pass
    except OSError:
        logger.error("Couldn't open user configuration file")


reload_config()
