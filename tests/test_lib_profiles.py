"""Tests for lib.profiles -- the profile catalog."""

import dataclasses

import pytest

from lib.errors import UnknownProfileError
from lib.profiles import CUSTOM, PROFILE_ORDER, PROFILES, CodecFamily, get_profile, is_valid_choice


def test_six_fixed_profiles():
    assert len(PROFILE_ORDER) == 6
    assert set(PROFILE_ORDER) == set(PROFILES)


def test_catalog_keys_match_names():
    for name, profile in PROFILES.items():
        assert profile.name == name


def test_families_cover_four_codecs():
    assert {p.family for p in PROFILES.values()} == set(CodecFamily)


def test_get_profile():
    profile = get_profile("webm_vp9")
    assert profile.extension == "webm"
    assert profile.audio_codec == "opus"
    assert profile.audio_encoder == "libopus"


def test_get_profile_unknown():
    with pytest.raises(UnknownProfileError, match="avi_divx"):
        get_profile("avi_divx")


def test_custom_is_a_choice_but_not_a_profile():
    assert is_valid_choice(CUSTOM)
    assert is_valid_choice("mp4_h264")
    assert not is_valid_choice("nope")
    with pytest.raises(UnknownProfileError):
        get_profile(CUSTOM)


def test_profiles_are_immutable():
    with pytest.raises(dataclasses.FrozenInstanceError):
        get_profile("mp4_h264").extension = "avi"


def test_description():
    assert get_profile("mkv_hevc").description == "MKV (HEVC / AAC)"
