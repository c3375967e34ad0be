"""
Garmin G1000 track log renderer.

Produces the fixed-width CSV layout written by the G1000 data logger: an
airframe line, a unit row, a column-name row, then one line per sample.
Only date/time, position, altitude, ground speed, attitude and heading are
populated; every other column is a width-correct blank.
"""

from datetime import datetime
from typing import Iterable, Optional

from tracklog.models.track import AirframeInfo, TrackLog, TrackPoint, to_utc


FILENAME_TIME_FORMAT = "%Y-%m-%d-%H:%M"

UNIT_ROW = (
    "#yyy-mm-dd, hh:mm:ss,   hh:mm,  ident,      degrees,      degrees, ft Baro,  inch,  ft msl,"
    " deg C,     kt,     kt,     fpm,    deg,    deg,      G,      G,   deg,   deg, volts,   gals,"
    "   gals,      gph,      psi,   deg F,     psi,     Hg,    rpm,   deg F,   deg F,   deg F,"
    "   deg F,   deg F,   deg F,   deg F,   deg F,  ft wgs,  kt, enum,    deg,    MHz,    MHz,"
    "     MHz,     MHz,    fsd,    fsd,     kt,   deg,     nm,    deg,    deg,   bool,  enum,"
    "   enum,   deg,   deg,   fpm,   enum,   mt,    mt,     mt,    mt,     mt"
)

COLUMN_ROW = (
    "  Lcl Date, Lcl Time, UTCOfst, AtvWpt,     Latitude,    Longitude,    AltB, BaroA,  AltMSL,"
    "   OAT,    IAS, GndSpd,    VSpd,  Pitch,   Roll,  LatAc, NormAc,   HDG,   TRK, volt1,  FQtyL,"
    "  FQtyR, E1 FFlow, E1 FPres, E1 OilT, E1 OilP, E1 MAP, E1 RPM, E1 CHT1, E1 CHT2, E1 CHT3,"
    " E1 CHT4, E1 EGT1, E1 EGT2, E1 EGT3, E1 EGT4,  AltGPS, TAS, HSIS,    CRS,   NAV1,   NAV2,"
    "    COM1,    COM2,   HCDI,   VCDI, WndSpd, WndDr, WptDst, WptBrg, MagVar, AfcsOn, RollM,"
    " PitchM, RollC, PichC, VSpdG, GPSfix,  HAL,   VAL, HPLwas, HPLfd, VPLwas"
)

# Widths of the blank columns that follow each populated field
_AFTER_LON = (8, 6)                 # AltB, BaroA
_AFTER_ALT = (6, 7)                 # OAT, IAS
_AFTER_SPD = (8,)                   # VSpd
_AFTER_BANK = (
    7, 8, 5, 6, 6, 7, 7, 9, 9, 8, 8, 7, 7,
    8, 8, 8, 8, 8, 8, 8, 8, 8, 4, 5,
)                                   # LatAc .. HSIS


def render_header(airframe: AirframeInfo) -> str:
    """Airframe line plus the unit and column-name rows, newline terminated."""
    airframe_line = (
        f'#airframe_info, log_version="1.00", airframe_name="{airframe.airframe_name}", '
        f'unit_software_part_number="000-A0000-0A", unit_software_version="9.00", '
        f'system_software_part_number="000-A0000-00", system_id="{airframe.system_id}", '
        "mode=NORMAL,"
    )
    return f"{airframe_line}\n{UNIT_ROW}\n{COLUMN_ROW}\n"


def render_row(point: TrackPoint) -> str:
    """One fixed-width data line (without newline)."""
    fields = [
        point.date.rjust(10),
        point.time.rjust(9),
        point.utc_offset.rjust(8),
        _blank(7),
        format_coordinate(point.latitude).ljust(13),
        format_coordinate(point.longitude).ljust(13),
        *_blanks(_AFTER_LON),
        str(point.altitude_ft).rjust(8),
        *_blanks(_AFTER_ALT),
        _optional_int(point.speed_kt).rjust(7),
        *_blanks(_AFTER_SPD),
        point.pitch.rjust(7),
        point.bank.rjust(7),
        *_blanks(_AFTER_BANK),
        _optional_int(point.heading_deg).rjust(7),
    ]
    return ",".join(fields)


def render_rows(points: Iterable[TrackPoint]) -> str:
    return "".join(f"{render_row(p)}\n" for p in points)


def render_tracklog(tracklog: TrackLog) -> str:
    """Complete file contents: header followed by every track in source order."""
    return render_header(tracklog.airframe) + render_rows(tracklog.rows)


def default_filename(airframe: AirframeInfo, start: datetime) -> str:
    """`<IDENT>-<yyyy-mm-dd-HH:MM>.csv` from the canonical start time (UTC)."""
    return f"{airframe.system_id}-{to_utc(start).strftime(FILENAME_TIME_FORMAT)}.csv"


def format_coordinate(value: float) -> str:
    """Shortest round-trip decimal, without a trailing `.0` on whole degrees."""
    if value.is_integer():
        return str(int(value))
    return repr(value)


def _optional_int(value: Optional[int]) -> str:
    return "" if value is None else str(value)


def _blank(width: int) -> str:
    return " " * width


def _blanks(widths: tuple[int, ...]) -> list[str]:
    return [_blank(w) for w in widths]
