# logger.py
import logging
import os
import sys

import colorlog

from .. import constants

PACKAGE = "vpcbuilder"

LOG_COLORS = {
    'DEBUG': 'cyan',
    'INFO': 'green',
    'WARNING': 'yellow',
    'ERROR': 'red',
    'CRITICAL': 'red,bg_white',
}


def _console_formatter(use_colors: bool) -> logging.Formatter:
    if use_colors:
        return colorlog.ColoredFormatter(
            '%(log_color)s[%(levelname).4s]%(reset)s %(cyan)s%(name)s%(reset)s: %(message)s',
            log_colors=LOG_COLORS,
        )
    return logging.Formatter('[%(levelname).4s] %(name)s: %(message)s')


def _add_file_handler(root: logging.Logger, log_file: str):
    try:
        handler = logging.FileHandler(log_file, mode='w', encoding='utf-8')
    except OSError as e:
        root.error(f"Cannot write log file '{log_file}': {e}")
        return
    handler.setFormatter(logging.Formatter(
        '%(asctime)s [%(levelname).4s] %(name)s: %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S',
    ))
    root.addHandler(handler)
    root.info(f"Logging to file: {log_file}")


def setup_logger(debug: bool = False, module_levels: dict | None = None, log_file: str | None = None):
    """
    Configure the root logger once per process.

    Console output goes to stderr, colored on a terminal unless NO_COLOR is
    set, so templates written to stdout stay clean. Calling it again only
    updates the levels.

    Args:
        debug: DEBUG instead of INFO on the root logger
        module_levels: per-logger levels, see ``parse_module_levels``;
            read from VPCB_LOG_LEVELS when omitted
        log_file: optional file receiving a timestamped copy of the log
    """
    root = logging.getLogger()
    root.setLevel(logging.DEBUG if debug else logging.INFO)

    if not root.handlers:
        console = logging.StreamHandler(sys.stderr)
        console.setFormatter(_console_formatter(sys.stderr.isatty() and not os.environ.get("NO_COLOR")))
        root.addHandler(console)
        if log_file:
            _add_file_handler(root, log_file)

    if module_levels is None:
        module_levels = parse_module_levels(os.environ.get(constants.LOG_LEVELS_ENV))
    apply_module_levels(module_levels)


def parse_module_levels(text: str | None) -> dict:
    """'asm=debug,net=INFO' -> {'asm': 'DEBUG', 'net': 'INFO'}; malformed pairs are skipped."""
    levels = {}
    for pair in (text or "").split(','):
        name, sep, level = pair.partition('=')
        if sep and name.strip() and level.strip():
            levels[name.strip()] = level.strip().upper()
    return levels


def apply_module_levels(module_levels: dict):
    for name, level_name in module_levels.items():
        level = logging.getLevelName(level_name.upper())
        if not isinstance(level, int):
            logging.getLogger(__name__).warning(f"Ignoring unknown log level '{level_name}' for '{name}'")
            continue
        logging.getLogger(resolve_logger_name(name)).setLevel(level)


def resolve_logger_name(name: str) -> str:
    """
    Expand a short alias ('asm') or a package-relative module
    ('providers.aws') to its logger name; anything else is used as given.
    """
    if name in constants.LOG_ALIAS_MAP:
        return constants.LOG_ALIAS_MAP[name]
    if name.split('.', 1)[0] in constants.KNOWN_TOP_MODULES:
        return f"{PACKAGE}.{name}"
    return name
