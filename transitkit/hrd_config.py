"""Column layouts and file names of the supported HRD format versions."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from pathlib import PurePosixPath

from .directory import Dir, DirType

ENCODING = "ISO8859-1"
SCHEDULE_DATA = "fahrten"
CORE_DATA = "stamm"

MAX_SIZE = (1 << 64) - 1


@dataclass(frozen=True)
class Field:
    """A fixed-width column: ``size`` characters starting at ``start``."""

    start: int
    size: int

    MAX_SIZE = MAX_SIZE


@dataclass(frozen=True)
class RangeParseInformation:
    """Columns giving the stop range (EVA numbers or indices) a rule applies to."""

    from_eva_or_idx: Field
    to_eva_or_idx: Field
    from_hhmm_or_idx: Field
    to_hhmm_or_idx: Field


class FilenameKey(enum.IntEnum):
    ATTRIBUTES = 0
    STATIONS = 1
    COORDINATES = 2
    BITFIELDS = 3
    TRACKS = 4
    INFOTEXT = 5
    BASIC_DATA = 6
    CATEGORIES = 7
    DIRECTIONS = 8
    PROVIDERS = 9
    THROUGH_SERVICES = 10
    MERGE_SPLIT_SERVICES = 11
    TIMEZONES = 12
    FOOTPATHS = 13
    FOOTPATHS_EXT = 14


@dataclass(frozen=True)
class _Attributes:
    code: Field
    text_mul_spaces: Field
    text_normal: Field


@dataclass(frozen=True)
class _Bitfields:
    index: Field
    value: Field


@dataclass(frozen=True)
class _Categories:
    code: Field
    output_rule: Field
    name: Field


@dataclass(frozen=True)
class _Directions:
    eva: Field
    text: Field


@dataclass(frozen=True)
class _MergeSplit:
    line_length: int
    bitfield: Field
    key1_nr: Field
    key1_admin: Field
    key2_nr: Field
    key2_admin: Field
    eva_begin: Field
    eva_end: Field


@dataclass(frozen=True)
class _MetaStations:
    eva: Field


@dataclass(frozen=True)
class _MetaFootpaths:
    from_eva: Field
    to_eva: Field
    duration: Field


@dataclass(frozen=True)
class _Meta:
    meta_stations: _MetaStations
    footpaths: _MetaFootpaths


@dataclass(frozen=True)
class _StationNames:
    eva: Field
    name: Field


@dataclass(frozen=True)
class _StationCoords:
    eva: Field
    lng: Field
    lat: Field


@dataclass(frozen=True)
class _Stations:
    names: _StationNames
    coords: _StationCoords


@dataclass(frozen=True)
class _ThroughServices:
    bitfield: Field
    key1_nr: Field
    key1_admin: Field
    key2_nr: Field
    key2_admin: Field
    eva: Field


@dataclass(frozen=True)
class _Timezones:
    type1_eva: Field
    type1_first_valid_eva: Field
    type2_eva: Field
    type2_dst_to_midnight: Field
    type3_dst_to_midnight1: Field
    type3_bitfield_idx1: Field
    type3_bitfield_idx2: Field
    type3_dst_to_midnight2: Field
    type3_dst_to_midnight3: Field


@dataclass(frozen=True)
class _Tracks:
    prov_nr: Field


@dataclass(frozen=True)
class _TrackRules:
    min_line_length: int
    eva_num: Field
    train_num: Field
    admin: Field
    track_name: Field
    time: Field
    bitfield: Field


@dataclass(frozen=True)
class _ServiceInfo:
    att_code: Field
    cat: Field
    line: Field
    traff_days: Field
    dir: Field


@dataclass(frozen=True)
class Config:
    """Everything that differs between HRD format versions."""

    att: _Attributes
    bf: _Bitfields
    cat: _Categories
    dir: _Directions
    merge_spl: _MergeSplit
    meta: _Meta
    st: _Stations
    th_s: _ThroughServices
    tz: _Timezones
    track: _Tracks
    track_rul: _TrackRules
    s_info: _ServiceInfo
    attribute_parse_info: RangeParseInformation
    line_parse_info: RangeParseInformation
    category_parse_info: RangeParseInformation
    traffic_days_parse_info: RangeParseInformation
    direction_parse_info: RangeParseInformation
    version: str
    required_files: tuple[tuple[str, ...], ...]
    core_data: PurePosixPath
    fplan: PurePosixPath
    zip_prefix: PurePosixPath
    fplan_file_extension: str
    convert_utf8: bool

    def files(self, key: FilenameKey, index: int = 0) -> str:
        """Name of the ``index``-th candidate file for ``key``."""
        candidates = self.required_files[key] if key < len(self.required_files) else ()
        if index >= len(candidates):
            raise IndexError(f"{self.version}: no file {index} for {FilenameKey(key).name}")
        return candidates[index]

    def is_available(self, key: FilenameKey) -> bool:
        """True if this version has a file for ``key``."""
        return key < len(self.required_files) and bool(self.required_files[key])

    def prefix(self, d: Dir) -> PurePosixPath:
        """Directory prefix of the data inside ``d``."""
        return self.zip_prefix if d.type() is DirType.ZIP else PurePosixPath(".")


def _f(start: int, size: int) -> Field:
    return Field(start, size)


def _range(a: tuple[int, int], b: tuple[int, int], c: tuple[int, int], d: tuple[int, int]) -> RangeParseInformation:
    return RangeParseInformation(_f(*a), _f(*b), _f(*c), _f(*d))


_ATT = _Attributes(_f(0, 2), _f(21, MAX_SIZE), _f(12, MAX_SIZE))
_BF = _Bitfields(_f(0, 6), _f(7, MAX_SIZE))
_DIR = _Directions(_f(0, 7), _f(8, MAX_SIZE))
_META = _Meta(_MetaStations(_f(0, 7)), _MetaFootpaths(_f(0, 7), _f(8, 7), _f(16, 3)))
_ST = _Stations(
    _StationNames(_f(0, 7), _f(12, MAX_SIZE)),
    _StationCoords(_f(0, 7), _f(8, 10), _f(19, 10)),
)
_TH_S = _ThroughServices(_f(34, 6), _f(0, 5), _f(6, 6), _f(21, 5), _f(27, 6), _f(13, 7))
_TZ = _Timezones(
    _f(0, 7), _f(8, 7), _f(0, 7), _f(8, 5), _f(14, 5), _f(20, 8), _f(34, 8), _f(29, 4), _f(43, 4)
)
_TRACK = _Tracks(_f(0, 5))

_CAT_OLD = _Categories(_f(0, 3), _f(9, 2), _f(12, 8))
_CAT_NEW = _Categories(_f(0, 3), _f(9, 1), _f(11, 8))


def _track_rules(min_line_length: int) -> _TrackRules:
    return _TrackRules(min_line_length, _f(0, 7), _f(8, 5), _f(14, 6), _f(21, 8), _f(30, 4), _f(35, 6))


def _s_info(line_size: int) -> _ServiceInfo:
    return _ServiceInfo(_f(3, 2), _f(3, 3), _f(3, line_size), _f(22, 6), _f(5, 7))


_ATTRIBUTE_PARSE = _range((6, 7), (14, 7), (29, 6), (36, 6))
_LINE_PARSE_OLD = _range((9, 7), (17, 7), (25, 6), (32, 6))
_LINE_PARSE_NEW = _range((12, 7), (20, 7), (28, 6), (35, 6))
_CATEGORY_PARSE = _range((7, 7), (15, 7), (23, 6), (30, 6))
_TRAFFIC_DAYS_PARSE = _range((6, 7), (14, 7), (29, 6), (36, 6))
_DIRECTION_PARSE = _range((13, 7), (21, 7), (29, 6), (36, 6))

_MERGE_SPL_NEW = _MergeSplit(50, _f(44, 6), _f(16, 6), _f(23, 6), _f(30, 6), _f(37, 6), _f(0, 7), _f(8, 7))


def _config(
    *,
    cat: _Categories,
    merge_spl: _MergeSplit,
    track_rul: _TrackRules,
    s_info: _ServiceInfo,
    line_parse_info: RangeParseInformation,
    version: str,
    required_files: list[list[str]],
    core_data: str,
    fplan: str,
    zip_prefix: str,
    fplan_file_extension: str,
    convert_utf8: bool,
) -> Config:
    return Config(
        att=_ATT,
        bf=_BF,
        cat=cat,
        dir=_DIR,
        merge_spl=merge_spl,
        meta=_META,
        st=_ST,
        th_s=_TH_S,
        tz=_TZ,
        track=_TRACK,
        track_rul=track_rul,
        s_info=s_info,
        attribute_parse_info=_ATTRIBUTE_PARSE,
        line_parse_info=line_parse_info,
        category_parse_info=_CATEGORY_PARSE,
        traffic_days_parse_info=_TRAFFIC_DAYS_PARSE,
        direction_parse_info=_DIRECTION_PARSE,
        version=version,
        required_files=tuple(tuple(names) for names in required_files),
        core_data=PurePosixPath(core_data),
        fplan=PurePosixPath(fplan),
        zip_prefix=PurePosixPath(zip_prefix),
        fplan_file_extension=fplan_file_extension,
        convert_utf8=convert_utf8,
    )


HRD_5_00_8 = _config(
    cat=_CAT_OLD,
    merge_spl=_MergeSplit(53, _f(47, 6), _f(18, 5), _f(25, 6), _f(33, 5), _f(40, 6), _f(0, 7), _f(9, 7)),
    track_rul=_track_rules(22),
    s_info=_s_info(5),
    line_parse_info=_LINE_PARSE_OLD,
    version="hrd_5_00_8",
    required_files=[
        ["attributd_int_int.101", "attributd_int.101"],
        ["bahnhof.101"],
        ["dbkoord_geo.101"],
        ["bitfield.101"],
        ["gleise.101"],
        ["infotext.101"],
        ["eckdaten.101"],
        ["zugart_int.101"],
        ["richtung.101"],
        ["unternehmen_ris.101"],
        ["durchbi.101"],
        ["vereinig_vt.101"],
        ["zeitvs.101"],
        ["metabhf.101"],
        ["metabhf_zusatz.101"],
    ],
    core_data="stamm",
    fplan="fahrten",
    zip_prefix="rohdaten",
    fplan_file_extension="",
    convert_utf8=False,
)

HRD_5_20_26 = _config(
    cat=_CAT_OLD,
    merge_spl=_MERGE_SPL_NEW,
    track_rul=_track_rules(22),
    s_info=_s_info(8),
    line_parse_info=_LINE_PARSE_NEW,
    version="hrd_5_20_26",
    required_files=[
        ["attributd.txt"],
        ["bahnhof.txt"],
        ["bfkoord.txt"],
        ["bitfield.txt"],
        ["gleise.txt"],
        ["infotext.txt"],
        ["eckdaten.txt"],
        ["zugart.txt"],
        ["richtung.txt"],
        ["unternehmen_ris.txt"],
        ["durchbi.txt"],
        ["vereinig_vt.txt"],
        ["zeitvs.txt"],
        ["metabhf.txt"],
    ],
    core_data="stamm",
    fplan="fahrten",
    zip_prefix="rohdaten",
    fplan_file_extension="",
    convert_utf8=False,
)

HRD_5_20_39 = _config(
    cat=_CAT_NEW,
    merge_spl=_MERGE_SPL_NEW,
    track_rul=_track_rules(34),
    s_info=_s_info(8),
    line_parse_info=_LINE_PARSE_NEW,
    version="hrd_5_20_39",
    required_files=[
        ["ATTRIBUT_DE"],
        ["BAHNHOF"],
        ["BFKOORD_GEO", "BFKOORD_WGS"],
        ["BITFELD"],
        ["GLEIS"],
        ["INFOTEXT_DE"],
        ["ECKDATEN"],
        ["ZUGART"],
        ["RICHTUNG"],
        ["BETRIEB_DE"],
        ["DURCHBI"],
        [],
        ["ZEITVS"],
        ["METABHF"],
        [],
    ],
    core_data=".",
    fplan="FPLAN",
    zip_prefix=".",
    fplan_file_extension="",
    convert_utf8=True,
)

HRD_5_20_AVV = _config(
    cat=_CAT_NEW,
    merge_spl=_MergeSplit(
        50, _f(MAX_SIZE, 0), _f(16, 5), _f(22, 6), _f(29, 5), _f(35, 6), _f(0, 7), _f(8, 7)
    ),
    track_rul=_track_rules(22),
    s_info=_s_info(8),
    line_parse_info=_LINE_PARSE_NEW,
    version="hrd_5_20_avv",
    required_files=[
        ["attribut_de"],
        ["bahnhof"],
        ["bfkoord"],
        ["bitfeld"],
        ["gleise"],
        ["infotext"],
        ["eckdaten"],
        ["zugart"],
        ["richtung"],
        ["betrieb"],
        ["durchbi"],
        ["vereinig"],
        ["zeitvs"],
        ["metabf"],
    ],
    core_data=".",
    fplan=".",
    zip_prefix=".",
    fplan_file_extension=".LIN",
    convert_utf8=False,
)

CONFIGS = (HRD_5_00_8, HRD_5_20_26, HRD_5_20_39, HRD_5_20_AVV)