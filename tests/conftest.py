from __future__ import annotations

import logging

import pytest

from plexupdate.modules.plex.config import DEFAULT_CONFIG, UpdaterConfig
from plexupdate.modules.plex.models import InstalledState, VersionTuple
from plexupdate.utils.index import LOGGER_NAME


@pytest.fixture
def config(tmp_path) -> UpdaterConfig:
    raw = {"config": dict(DEFAULT_CONFIG["config"])}
    raw["config"]["download_dir"] = str(tmp_path / "plex_update")
    raw["config"]["log_file"] = str(tmp_path / "plex_updater.log")
    raw["config"]["service_stop_wait"] = 0
    raw["config"]["package"] = dict(DEFAULT_CONFIG["config"]["package"])
    raw["config"]["package"]["info_file"] = str(tmp_path / "INFO")
    raw["config"]["package"]["start_stop_script"] = str(tmp_path / "start-stop-status")
    return UpdaterConfig.from_dict(raw)


@pytest.fixture
def installed() -> InstalledState:
    return InstalledState(VersionTuple(1, 42, 1, 10060), "720010060")


@pytest.fixture(autouse=True)
def reset_updater_logger():
    yield
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
