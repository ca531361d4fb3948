"""
HOMESERVER Update Management System
Copyright (C) 2024 HOMESERVER LLC

This program is free software: you can redistribute it and/or modify
it under the terms of the GNU General Public License as published by
the Free Software Foundation, either version 3 of the License, or
(at your option) any later version.

This program is distributed in the hope that it will be useful,
but WITHOUT ANY WARRANTY; without even the implied warranty of
MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
GNU General Public License for more details.

You should have received a copy of the GNU General Public License
along with this program.  If not, see <https://www.gnu.org/licenses/>.
"""

import json
import logging
import os
import sys
from pathlib import Path

LOGGER_NAME = "plexupdate"

LOG_FORMAT = '[%(asctime)s] [%(levelname)s] %(message)s'
LOG_DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
}


def log_message(message, level="INFO"):
    """
    Log a message through the shared updater logger.
    Args:
        message (str): The message to log.
        level (str): Log level (e.g., 'INFO', 'ERROR').
    """
    logging.getLogger(LOGGER_NAME).log(_LEVELS.get(level.upper(), logging.INFO), message)


def setup_update_logging(log_file=None, verbose=False):
    """
    Configure stdout logging and, when possible, the persistent audit log.

    Args:
        log_file: Path of the audit log file, or None to log to stdout only
        verbose: Emit DEBUG messages to stdout as well

    Returns:
        logging.Logger: The configured updater logger
    """
    formatter = logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.DEBUG)
    for h in list(logger.handlers):
        logger.removeHandler(h)
        h.close()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(logging.DEBUG if verbose else logging.INFO)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        try:
            Path(log_file).parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(log_file)
            file_handler.setLevel(logging.DEBUG)
            file_handler.setFormatter(formatter)
            logger.addHandler(file_handler)
        except OSError as e:
            log_message(f"Audit log {log_file} is not writable, logging to stdout only: {e}", "WARNING")

    return logger


def load_json_config(config_path, default):
    """
    Load a module's index.json, falling back to the given default.

    Args:
        config_path: Path to the index.json file
        default: Configuration returned when the file is missing or invalid

    Returns:
        dict: Loaded configuration or the default
    """
    try:
        with open(config_path, 'r') as f:
            return json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        log_message(f"Failed to load module config from {config_path}: {e}", "WARNING")
        return default


def get_module_version(module_path: str) -> str:
    """
    Get the schema version from a module's index.json file.

    Args:
        module_path (str): Path to the module directory

    Returns:
        str: The schema version from index.json, or "unknown" if not found
    """
    config = load_json_config(os.path.join(module_path, "index.json"), {})
    return config.get("metadata", {}).get("schema_version", "unknown")
