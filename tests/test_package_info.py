from __future__ import annotations

import json

import pytest

from plexupdate.modules.plex.architecture import (
    build_download_url,
    detect_architecture,
    package_filename,
)
from plexupdate.modules.plex.config import DownloadLayout, UpdaterConfig, load_module_config
from plexupdate.modules.plex.errors import UnsupportedArchitecture
from plexupdate.modules.plex.models import InstalledState, ReleaseCandidate, VersionTuple
from plexupdate.modules.plex.package_info import get_installed_state, read_package_info


def test_read_installed_state_from_info_file(tmp_path) -> None:
    info = tmp_path / "INFO"
    info.write_text('package="PlexMediaServer"\nversion="1.42.1.10060-720010060"\narch="x86_64"\n')

    state = get_installed_state(str(info))

    assert state == InstalledState(VersionTuple(1, 42, 1, 10060), "720010060")
    assert state.is_installed


def test_read_package_info_handles_unquoted_values(tmp_path) -> None:
    info = tmp_path / "INFO"
    info.write_text("# comment\nversion=1.2.3.4-abc\n\nbroken line\n")

    assert read_package_info(str(info)) == {"version": "1.2.3.4-abc"}


def test_missing_info_file_means_not_installed(tmp_path) -> None:
    state = get_installed_state(str(tmp_path / "INFO"))

    assert state == InstalledState.not_installed()
    assert not state.is_installed
    assert str(state.version) == "0.0.0.0"


def test_unparseable_installed_version_means_not_installed(tmp_path) -> None:
    info = tmp_path / "INFO"
    info.write_text('version="beta"\n')

    assert get_installed_state(str(info)) == InstalledState.not_installed()


@pytest.mark.parametrize(
    "machine, expected",
    [("x86_64", "x86_64"), ("i686", "x86"), ("armv7l", "armv7hf"), ("aarch64", "aarch64")],
)
def test_detect_architecture(machine: str, expected: str) -> None:
    assert detect_architecture(machine) == expected


def test_detect_architecture_rejects_unknown_machines() -> None:
    with pytest.raises(UnsupportedArchitecture):
        detect_architecture("ppc64le")


def test_build_download_url() -> None:
    candidate = ReleaseCandidate(VersionTuple(1, 42, 1, 10060), "4e8b05daf", "github")

    url = build_download_url(candidate, "x86_64", DownloadLayout())

    assert url == ("https://downloads.plex.tv/plex-media-server-new/1.42.1.10060-4e8b05daf/"
                   "synology-dsm72/PlexMediaServer-1.42.1.10060-4e8b05daf-x86_64_DSM72.spk")
    assert url.endswith("/" + package_filename("PlexMediaServer", candidate.version_build, "x86_64",
                                               DownloadLayout()))


def test_shipped_config_matches_defaults() -> None:
    config = UpdaterConfig.from_dict(load_module_config())

    assert config.package_name == "PlexMediaServer"
    assert config.request_timeout > 0
    assert config.build_probe_hashes[0] == "4e8b05daf"


def test_broken_config_file_falls_back_to_defaults(tmp_path) -> None:
    path = tmp_path / "index.json"
    path.write_text("{not json")

    loaded = load_module_config(str(path))

    assert loaded["metadata"]["module_name"] == "plex"


def test_partial_config_keeps_defaults_for_missing_keys(tmp_path) -> None:
    path = tmp_path / "index.json"
    path.write_text(json.dumps({"config": {"request_timeout": 3,
                                           "download": {"base_url": "https://mirror.example/plex/"},
                                           "build_probe": {"enabled": False}}}))

    config = UpdaterConfig.from_dict(load_module_config(str(path)))

    assert config.request_timeout == 3
    assert config.download.base_url == "https://mirror.example/plex"
    assert config.download.platform == "DSM72"
    assert config.build_probe_enabled is False
    assert config.info_file == "/var/packages/PlexMediaServer/INFO"
