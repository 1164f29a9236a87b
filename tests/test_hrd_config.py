import dataclasses
import io
import zipfile
from pathlib import PurePosixPath

import pytest

from transitkit.directory import MemDir, ZipDir
from transitkit.hrd_config import (
    CONFIGS,
    HRD_5_00_8,
    HRD_5_20_26,
    HRD_5_20_39,
    HRD_5_20_AVV,
    Config,
    Field,
    FilenameKey,
)


def _zip_bytes() -> bytes:
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w") as zf:
        zf.writestr("rohdaten/stamm/bahnhof.txt", "0000001     A\n")
    return buf.getvalue()


def test_versions_in_order():
    assert [(c.version, Config.files(c, FilenameKey.STATIONS)) for c in CONFIGS] == [
        ("hrd_5_00_8", "bahnhof.101"),
        ("hrd_5_20_26", "bahnhof.txt"),
        ("hrd_5_20_39", "BAHNHOF"),
        ("hrd_5_20_avv", "bahnhof"),
    ]


def test_files_returns_named_candidates():
    assert HRD_5_00_8.files(FilenameKey.ATTRIBUTES) == "attributd_int_int.101"
    assert HRD_5_00_8.files(FilenameKey.ATTRIBUTES, 1) == "attributd_int.101"
    assert HRD_5_20_26.files(FilenameKey.STATIONS) == "bahnhof.txt"
    assert HRD_5_20_39.files(FilenameKey.COORDINATES, 1) == "BFKOORD_WGS"
    assert HRD_5_20_AVV.files(FilenameKey.FOOTPATHS) == "metabf"


def test_files_missing_candidate_raises():
    with pytest.raises(IndexError):
        HRD_5_20_39.files(FilenameKey.MERGE_SPLIT_SERVICES)
    with pytest.raises(IndexError):
        HRD_5_20_26.files(FilenameKey.FOOTPATHS_EXT)
    with pytest.raises(IndexError):
        HRD_5_20_26.files(FilenameKey.STATIONS, 1)


def test_is_available():
    assert HRD_5_00_8.is_available(FilenameKey.FOOTPATHS_EXT)
    assert not HRD_5_20_26.is_available(FilenameKey.FOOTPATHS_EXT)
    assert not HRD_5_20_39.is_available(FilenameKey.MERGE_SPLIT_SERVICES)
    assert not HRD_5_20_39.is_available(FilenameKey.FOOTPATHS_EXT)
    assert HRD_5_20_AVV.is_available(FilenameKey.MERGE_SPLIT_SERVICES)


@pytest.mark.parametrize("config", CONFIGS)
def test_every_config_has_core_files(config):
    for key in (FilenameKey.STATIONS, FilenameKey.BITFIELDS, FilenameKey.BASIC_DATA, FilenameKey.TIMEZONES):
        assert Config.is_available(config, key)
        assert Config.files(config, key) == config.required_files[key][0]


def test_prefix_depends_on_dir_type():
    zd = ZipDir(_zip_bytes())
    md = MemDir({"stamm/bahnhof.txt": ""})
    assert HRD_5_00_8.prefix(zd) == PurePosixPath("rohdaten")
    assert HRD_5_00_8.prefix(md) == PurePosixPath(".")
    assert HRD_5_20_39.prefix(zd) == PurePosixPath(".")


def test_paths():
    assert HRD_5_20_26.core_data / HRD_5_20_26.files(FilenameKey.STATIONS) == PurePosixPath("stamm/bahnhof.txt")
    assert HRD_5_20_26.fplan == PurePosixPath("fahrten")
    assert HRD_5_20_39.fplan == PurePosixPath("FPLAN")
    assert HRD_5_20_AVV.fplan_file_extension == ".LIN"


def test_utf8_conversion_only_for_5_20_39():
    assert [(c.convert_utf8, Config.files(c, FilenameKey.BITFIELDS)) for c in CONFIGS] == [
        (False, "bitfield.101"),
        (False, "bitfield.txt"),
        (True, "BITFELD"),
        (False, "bitfeld"),
    ]


def test_merge_split_layouts():
    assert HRD_5_00_8.merge_spl.line_length == 53
    assert HRD_5_00_8.merge_spl.bitfield == Field(47, 6)
    assert HRD_5_20_26.merge_spl.key1_nr == Field(16, 6)
    assert HRD_5_20_AVV.merge_spl.bitfield == Field(Field.MAX_SIZE, 0)
    assert HRD_5_20_AVV.merge_spl.key2_admin == Field(35, 6)


def test_category_layouts_differ_between_versions():
    assert HRD_5_00_8.cat.output_rule == Field(9, 2)
    assert HRD_5_00_8.cat.name == Field(12, 8)
    assert HRD_5_20_39.cat.output_rule == Field(9, 1)
    assert HRD_5_20_39.cat.name == Field(11, 8)
    assert HRD_5_20_26.cat == HRD_5_00_8.cat


def test_line_and_track_rule_layouts():
    assert HRD_5_00_8.s_info.line == Field(3, 5)
    assert HRD_5_20_26.s_info.line == Field(3, 8)
    assert HRD_5_00_8.line_parse_info.from_eva_or_idx == Field(9, 7)
    assert HRD_5_20_39.line_parse_info.to_hhmm_or_idx == Field(35, 6)
    assert HRD_5_20_39.track_rul.min_line_length == 34
    assert HRD_5_20_26.track_rul.min_line_length == 22


def test_shared_station_layout():
    for config in CONFIGS:
        assert config.st.names.name == Field(12, Field.MAX_SIZE)
        assert config.st.coords.lat == Field(19, 10)
        assert config.tz == HRD_5_00_8.tz


def test_config_is_immutable():
    with pytest.raises(dataclasses.FrozenInstanceError):
        HRD_5_20_26.version = "other"
    assert HRD_5_20_26.version == "hrd_5_20_26"
    assert Config.files(HRD_5_20_26, FilenameKey.STATIONS) == "bahnhof.txt"


def test_filename_key_indices_match_file_lists():
    assert list(FilenameKey) == sorted(FilenameKey)
    assert len(HRD_5_00_8.required_files) == len(FilenameKey)
    assert HRD_5_20_26.required_files[FilenameKey.PROVIDERS] == ("unternehmen_ris.txt",)
    assert Config.files(HRD_5_00_8, FilenameKey.FOOTPATHS_EXT) == "metabhf_zusatz.101"
    assert Config.files(HRD_5_20_26, FilenameKey.PROVIDERS) == "unternehmen_ris.txt"