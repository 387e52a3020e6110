"""Shared data types: QoS levels, the ambient payload and start-up arguments."""

from __future__ import annotations

import dataclasses
import enum
import json
import math
import os
import re
import struct
import sys
from dataclasses import dataclass, field
from typing import Sequence

LOCATION_FIELD_SIZE = 256
HOSTNAME_FIELD_SIZE = 128
START_LOCATION_FIELD_SIZE = 64

_AMBIENT_STRUCT = struct.Struct(f"<{LOCATION_FIELD_SIZE}sddd")
_ATOI_PREFIX = re.compile(r"\s*([+-]?\d+)")
_OPTIONS_WITH_VALUE = frozenset("bpl")


class QoS(enum.IntEnum):
    """MQTT quality of service levels."""

    QOS_0 = 0
    QOS_1 = 1
    QOS_2 = 2


def _truncate(text: str, size: int) -> str:
    """Cut text so that it fits a NUL-terminated field of ``size`` bytes."""
    raw = text.encode("utf-8")[: size - 1]
    return raw.decode("utf-8", errors="ignore")


def _format_json_number(value: float) -> str:
    """Render a float with two decimals, trimming trailing zeros but keeping one."""
    if math.isnan(value):
        return "null"
    if math.isinf(value):
        return "-1e+9999" if value < 0 else "1e+9999"
    text = f"{value:.2f}"
    integral, _, fraction = text.partition(".")
    fraction = fraction.rstrip("0") or "0"
    return f"{integral}.{fraction}"


@dataclass
class Ambient:
    """Ambient readings sent as the payload of every MQTT message."""

    location: str = ""
    temperature: float = 0.0
    pressure: float = 0.0
    humidity: float = 0.0

    SIZE = _AMBIENT_STRUCT.size

    def pack(self) -> bytes:
        """Encode as the fixed-size binary payload."""
        location = _truncate(self.location, LOCATION_FIELD_SIZE).encode("utf-8")
        return _AMBIENT_STRUCT.pack(
            location, self.temperature, self.pressure, self.humidity
        )

    @classmethod
    def from_bytes(cls, data: bytes) -> "Ambient":
        """Decode a binary payload; short payloads are zero-filled."""
        data = bytes(data)
        if len(data) > _AMBIENT_STRUCT.size:
            raise ValueError(
                f"payload of {len(data)} bytes exceeds {_AMBIENT_STRUCT.size} bytes"
            )
        data = data.ljust(_AMBIENT_STRUCT.size, b"\0")
        raw_location, temperature, pressure, humidity = _AMBIENT_STRUCT.unpack(data)
        location = raw_location.split(b"\0", 1)[0].decode("utf-8", errors="replace")
        return cls(location, temperature, pressure, humidity)

    def as_json(self) -> str:
        """Compact JSON of the readings with two-decimal precision."""
        readings = {
            "humidity": self.humidity,
            "pressure": self.pressure,
            "temperature": self.temperature,
        }
        members = (
            f"{json.dumps(key)}:{_format_json_number(value)}"
            for key, value in readings.items()
        )
        return "{" + ",".join(members) + "}"


def _default_location() -> str:
    return f"location_{os.getpid()}"


@dataclass
class StartArgs:
    """Command line settings of the MQTT clients."""

    broker_hostname: str = "localhost"
    broker_port: int = 1883
    location: str = field(default_factory=_default_location)


def _atoi(text: str) -> int:
    match = _ATOI_PREFIX.match(text)
    return int(match.group(1)) if match else 0


def process_arguments(
    argv: Sequence[str], defaults: StartArgs | None = None
) -> StartArgs:
    """Parse ``-b host``, ``-p port`` and ``-l location`` from argv.

    ``argv`` excludes the program name. The location always starts out as
    ``location_<pid>``; unknown options are reported and ignored.
    """
    args = dataclasses.replace(defaults or StartArgs(), location=_default_location())
    items = list(argv)
    position = 0
    while position < len(items):
        arg = items[position]
        position += 1
        if arg == "--":
            break
        if not arg.startswith("-") or arg == "-":
            continue
        cluster = arg[1:]
        while cluster:
            option, cluster = cluster[0], cluster[1:]
            if option not in _OPTIONS_WITH_VALUE:
                print(f"invalid option -- '{option}'", file=sys.stderr)
                continue
            if cluster:
                value, cluster = cluster, ""
            elif position < len(items):
                value = items[position]
                position += 1
            else:
                print(f"option requires an argument -- '{option}'", file=sys.stderr)
                break
            if option == "b":
                args.broker_hostname = _truncate(value, HOSTNAME_FIELD_SIZE)
            elif option == "p":
                args.broker_port = _atoi(value) & 0xFFFF
            else:
                args.location = _truncate(value, START_LOCATION_FIELD_SIZE)
    return args