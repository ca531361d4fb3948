from __future__ import annotations

import itertools

import pytest

from plexupdate.modules.plex.errors import ParseFailure
from plexupdate.modules.plex.models import VersionTuple
from plexupdate.modules.plex.versioning import (
    Ordering,
    compare,
    find_malformed_components,
    iter_candidates,
    parse,
    parse_version_tuple,
    same_build,
)


@pytest.mark.parametrize(
    "text",
    [
        "PlexMediaServer-1.42.1.10060-4e8b05daf-x86_64_DSM72.spk",
        "https://downloads.plex.tv/plex-media-server-new/1.42.1.10060-4e8b05daf/synology-dsm72/x.spk",
        "1.42.1.10060-4e8b05daf",
        '{"tag_name": "1.42.1.10060-4e8b05daf"}',
    ],
)
def test_parse_extracts_version_and_build(text: str) -> None:
    candidate = parse(text, source="test")

    assert candidate.version == VersionTuple(1, 42, 1, 10060)
    assert candidate.build_id == "4e8b05daf"
    assert candidate.source == "test"
    assert candidate.version_build == "1.42.1.10060-4e8b05daf"


@pytest.mark.parametrize("arch", ["x86_64", "x86", "armv7hf", "aarch64"])
def test_parse_package_filename_for_every_architecture(arch: str) -> None:
    candidate = parse(f"PlexMediaServer-2.0.13.999-abc123-{arch}_DSM72.spk")

    assert candidate.version == (2, 0, 13, 999)
    assert candidate.build_id == "abc123"


def test_parse_numeric_build_identifier() -> None:
    candidate = parse('version="1.42.1.10060-720010060"')

    assert candidate.version == (1, 42, 1, 10060)
    assert candidate.build_id == "720010060"


def test_parse_without_build_identifier() -> None:
    candidate = parse("Plex 1.42.1.10060 released")

    assert candidate.version == (1, 42, 1, 10060)
    assert candidate.build_id is None
    assert candidate.version_build == "1.42.1.10060"


def test_parse_takes_first_match_only() -> None:
    candidate = parse("1.40.0.100-aaa111 then 1.42.1.10060-4e8b05daf")

    assert candidate.version == (1, 40, 0, 100)
    assert candidate.build_id == "aaa111"


def test_parse_lowercases_build_identifier() -> None:
    assert parse("1.2.3.4-ABCDEF").build_id == "abcdef"


def test_non_hex_suffix_is_not_a_build_identifier() -> None:
    assert parse("1.2.3.4-x86_64").build_id is None


def test_version_shaped_build_identifier_is_kept_whole() -> None:
    candidate = parse("1.42.1.10060-1.42.1.10061")

    assert candidate.version == (1, 42, 1, 10060)
    assert candidate.build_id == "1.42.1.10061"


def test_build_identifier_stops_at_file_extension() -> None:
    assert parse("PlexMediaServer-1.42.1.10060-4e8b05daf.spk").build_id == "4e8b05daf"


@pytest.mark.parametrize(
    "text",
    ["", "   ", None, 142, b"1.42.1.10060-abc", "1.42.1", "1.42.x.10060-abc",
     "no version here", "1.2.3.4.5", "v1.42-beta"],
)
def test_parse_rejects_malformed_text(text) -> None:
    with pytest.raises(ParseFailure):
        parse(text)


def test_parse_version_tuple() -> None:
    assert parse_version_tuple("1.42.2.0-ccc") == VersionTuple(1, 42, 2, 0)


def test_iter_candidates_yields_in_order() -> None:
    found = list(iter_candidates("1.1.1.1 and 2.2.2.2-ff"))

    assert [c.version for c in found] == [(1, 1, 1, 1), (2, 2, 2, 2)]
    assert [c.build_id for c in found] == [None, "ff"]


def test_compare_examples() -> None:
    assert compare((1, 42, 1, 10060), (1, 42, 1, 10061)) is Ordering.LESS
    assert compare((1, 42, 1, 10061), (1, 42, 1, 10060)) is Ordering.GREATER
    assert compare((1, 42, 1, 10060), (1, 42, 1, 10060)) is Ordering.EQUAL
    assert compare((2, 0, 0, 0), (1, 99, 99, 99999)) is Ordering.GREATER
    assert compare((1, 9, 0, 0), (1, 10, 0, 0)) is Ordering.LESS


def test_compare_pads_missing_components() -> None:
    assert compare((1, 42), (1, 42, 0, 0)) is Ordering.EQUAL
    assert compare((1, 42), (1, 42, 0, 1)) is Ordering.LESS


def test_compare_treats_non_numeric_as_zero() -> None:
    assert compare(("1", "x", "0", "0"), (1, 0, 0, 0)) is Ordering.EQUAL
    assert find_malformed_components(("1", "x", "0", None)) == ["x", None]
    assert find_malformed_components((1, 42, 1, 10060)) == []


def test_compare_is_a_total_order() -> None:
    versions = [
        (0, 0, 0, 0),
        (1, 0, 0, 0),
        (1, 42, 1, 10060),
        (1, 42, 1, 10061),
        (1, 42, 2, 0),
        (1, 100, 0, 0),
    ]
    for a, b in itertools.product(versions, repeat=2):
        forward = compare(a, b)
        backward = compare(b, a)
        assert forward.value == -backward.value
        assert (forward is Ordering.EQUAL) == (a == b)
        assert forward.value == (a > b) - (a < b)
    for a, b, c in itertools.product(versions, repeat=3):
        if compare(a, b) is Ordering.LESS and compare(b, c) is Ordering.LESS:
            assert compare(a, c) is Ordering.LESS


def test_same_build() -> None:
    assert same_build("aaa", "AAA")
    assert not same_build("aaa", "bbb")
    assert same_build(None, None)
    assert not same_build(None, "aaa")
