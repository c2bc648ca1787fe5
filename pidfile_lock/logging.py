# SPDX-License-Identifier: LGPL-2.1-or-later
# vim:ts=4:sw=4:et
#
# Copyright (c) 2024 The pidfile-lock authors
import logging
import logging.handlers
import pidfile_lock as pfl
from typing import Final, Optional, Union

__all__ = [
    'parse_level',
    'reconfigure_logging',
]

LEVELS: Final = ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')

config = pfl.config.get_config(__name__)
logger = logging.getLogger(__name__)
root_logger = logging.getLogger()
# Several processes contending for one lock usually share a log, so tag each line with its pid
formatter = logging.Formatter('%(asctime)s [%(process)d] %(levelname)s %(name)s: %(message)s')
installed_handlers: list[logging.Handler] = []


def parse_level(level: Union[str, int, None]) -> Optional[int]:
    if isinstance(level, str) and level.upper() in LEVELS:
        return getattr(logging, level.upper())
    if isinstance(level, int) and not isinstance(level, bool) and level in [getattr(logging, name) for name in LEVELS]:
        return level
    return None


def _install(handler: logging.Handler, level: int) -> None:
    handler.setFormatter(formatter)
    handler.setLevel(level)
    root_logger.addHandler(handler)
    installed_handlers.append(handler)


def reconfigure_logging(path: Optional[str] = None, level: Union[str, int, None] = None) -> None:
    level_int = parse_level(level or config.get('level'))
    if level_int is None:
        level_int = logging.WARNING

    # Only replace what we set up last time; the embedding program owns the rest
    while installed_handlers:
        handler = installed_handlers.pop()
        root_logger.removeHandler(handler)
        handler.close()
    _install(logging.StreamHandler(), level_int)

    path = path or config.get('path')
    if path:
        # Rotation is left to logrotate, since every locking process may hold this file open
        try:
            _install(logging.handlers.WatchedFileHandler(path, encoding='utf-8'), level_int)
        except OSError:
            logger.warning(f"Couldn't open log file {path}")
    root_logger.setLevel(level_int)

    if level_int < logging.INFO:
        logging.getLogger('asyncio').setLevel(logging.INFO)
