#!/usr/bin/env python3
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

import argparse
import os
import sys

from . import run_update
from .modules.plex.config import DEFAULT_CONFIG, UpdaterConfig, load_module_config
from .utils.index import log_message, setup_update_logging
from .utils.permissions import require_root
from .utils.run_lock import RunLock

MODULE_NAME = "plex"
DEFAULT_LOG_FILE = DEFAULT_CONFIG["config"]["log_file"]


def setup_global_update_logging(log_file=None, verbose=False):
    """
    Log to stdout and append to the audit log when it is writable.
    """
    setup_update_logging(log_file, verbose)
    log_message("=" * 80)
    log_message("PLEX UPDATE SESSION STARTED")
    log_message(f"Command: {' '.join(sys.argv)}")
    log_message(f"Working Directory: {os.getcwd()}")
    log_message(f"Python Version: {sys.version}")
    log_message("=" * 80)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Plex Media Server updater for Synology DSM")
    parser.add_argument("--force-build-update", action="store_true",
                        help="Update even when only the build hash differs")
    parser.add_argument("--check", action="store_true",
                        help="Only check for updates, don't install them")
    parser.add_argument("--config", action="store_true",
                        help="Show the effective module configuration")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="Log debug output")
    return parser


def main(argv=None):
    """
    Main entry point for the Plex updater.
    Exits 0 on success or when no update is needed, 1 on any failure.
    """
    args = build_parser().parse_args(argv)

    try:
        # Logging comes first so config load warnings reach the audit log
        setup_global_update_logging(DEFAULT_LOG_FILE, args.verbose)
        config = UpdaterConfig.from_dict(load_module_config())
        if config.log_file != DEFAULT_LOG_FILE:
            setup_update_logging(config.log_file, args.verbose)
            log_message(f"Audit log: {config.log_file}")

        if args.config:
            result = run_update(MODULE_NAME, ["--config"])
            sys.exit(0 if result and result.get("success") else 1)

        module_args = []
        if args.force_build_update:
            module_args.append("--force-build-update")

        if args.check:
            module_args.append("--check")
            result = run_update(MODULE_NAME, module_args)
        else:
            if not require_root():
                sys.exit(1)

            lock = RunLock(f"{config.download_dir.rstrip('/')}.lock")
            if not lock.acquire():
                sys.exit(1)
            try:
                result = run_update(MODULE_NAME, module_args)
            finally:
                lock.release()

        if not result or not result.get("success"):
            log_message("Plex update failed", "ERROR")
            sys.exit(1)
        sys.exit(0)

    except KeyboardInterrupt:
        log_message("Update process interrupted by user", "WARNING")
        sys.exit(130)


if __name__ == "__main__":
    main()
