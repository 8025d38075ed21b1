#!/usr/bin/env python3
"""
Rigol DS1000Z / MSO1000Z logic-analyzer capture library.

Arms a single-shot edge-triggered capture over SCPI, pulls the raw
logic-analyzer memory and its preamble, and turns the D0-D7 sample bytes
into per-signal transition indices. Works over a VISA session (TCP/IP)
or directly over the USB bulk endpoints.
"""
from __future__ import annotations

import json
import logging
import time
from abc import ABC, abstractmethod
from dataclasses import asdict, dataclass, field, fields
from enum import Enum, auto
from pathlib import Path
from typing import Iterable, Mapping

import numpy as np
import pyvisa
import usb.core
import usb.util
from numpy.typing import NDArray
from pyvisa.resources import MessageBasedResource


__all__ = [
    # Enums
    "WaveformFormat",
    "AcquisitionType",
    "CaptureState",
    # Exceptions
    "ScopeError",
    "ScopeConnectionError",
    "ScopeConfigurationError",
    "TransportError",
    "WriteError",
    "CaptureTimeout",
    "MalformedPreamble",
    "ShortRead",
    "FrameMismatch",
    # Config dataclasses
    "CaptureConfig",
    "load_config",
    "save_config",
    # Data dataclasses
    "Preamble",
    "WaveformFrame",
    "TransitionLog",
    "CaptureResult",
    # Transports
    "Transport",
    "VisaTransport",
    "UsbTransport",
    # Decoding
    "parse_preamble",
    "extract_edges",
    "save_capture",
    # Classes
    "RigolScope",
]


# Protocol limits of the DS1000Z family
MAX_POINTS_PER_QUERY = 125000   # samples per :WAV:DATA? in RAW/BYTE mode
HEADER_SIZE = 11                # "#9000125000" TMC block header
TERMINATOR_SIZE = 1             # trailing "\n"
STATUS_READ_SIZE = 100
PREAMBLE_READ_SIZE = 100
STATUS_QUERY = "TRIG:STAT?"
PREAMBLE_QUERY = ":WAV:PRE?"

DEFAULT_USB_VENDOR_ID = 0x1AB1   # Rigol Technologies
DEFAULT_USB_PRODUCT_ID = 0x04CE  # DS1xx4Z / MSO1xxZ

# Order matters: the LA pods must be on before the trigger source is
# meaningful, and :SING has to be last.
TRIGGER_SETUP: tuple[str, ...] = (
    ":CHAN1:DISP ON",         # Turn on ch1
    ":CHAN1:PROB 10",         # 10x probe
    ":CHAN1:UNIT VOLT",       # units in volts
    ":CHAN1:SCAL 1",          # 1V per division
    ":CHAN1:OFFS 0",          # 0 offset
    ":CHAN2:DISP OFF",
    ":CHAN3:DISP OFF",
    ":CHAN4:DISP OFF",
    ":LA:STAT ON",            # Turn on the logic analyzer
    ":LA:POD1:DISP ON",       # D0-D7 on
    ":LA:POD1:THR 3",         # logic 1 above 3V
    ":LA:POD2:DISP OFF",      # D8-D15 off
    ":LA:POD2:THR 3",
    ":TRIG:MODE EDGE",
    ":TRIG:EDG:SOUR CHAN1",
    ":TRIG:EDG:SLOP POS",     # rising edge
    ":TRIG:EDG:LEV 3",        # 3V
    ":ACQ:MDEP 125000",       # memory depth
    ":TIM:MAIN:SCAL 0.0002",  # s/div
    ":ACQ:TYPE HRES",         # high resolution
    ":SING",                  # single shot, wait for trigger
)

# ZX Spectrum ULA probe wiring used for ROM bus captures
DEFAULT_SIGNALS: dict[str, int] = {
    "RD": 0,
    "MREQ": 1,
    "A15": 2,
    "A14": 3,
    "ROMCS": 4,
}


class WaveformFormat(Enum):
    """Sample encoding reported by the preamble."""
    BYTE = 0
    WORD = 1
    ASCII = 2


class AcquisitionType(Enum):
    """Waveform read mode reported by the preamble."""
    NORMAL = 0
    MAX = 1
    RAW = 2


class CaptureState(Enum):
    """Lifecycle of a single-shot capture."""
    IDLE = auto()
    ARMED = auto()
    POLLING = auto()
    STOPPED = auto()
    TIMEOUT = auto()


# === Exceptions ===

class ScopeError(Exception):
    """Base exception for Rigol scope errors."""
    pass


class ScopeConnectionError(ScopeError):
    """Instrument could not be opened (USB device or VISA resource)."""
    pass


class ScopeConfigurationError(ScopeError):
    """Invalid configuration value."""
    pass


class TransportError(ScopeError):
    """Read or write failure at the transport boundary."""
    pass


class WriteError(TransportError):
    """A command was not fully written."""

    def __init__(self, command: str, cause: object) -> None:
        super().__init__(f"Failed to write {command!r}: {cause}")
        self.command = command
        self.cause = cause


class CaptureTimeout(ScopeError):
    """Trigger status never reached STOP."""

    def __init__(self, attempts: int) -> None:
        super().__init__(f"Timeout waiting for trigger after {attempts} polls")
        self.attempts = attempts


class MalformedPreamble(ScopeError):
    """Preamble line does not match the 10-field numeric schema."""

    def __init__(self, field_index: int, raw_value: str) -> None:
        super().__init__(
            f"Malformed preamble field {field_index}: {raw_value!r}"
        )
        self.field_index = field_index
        self.raw_value = raw_value


class ShortRead(ScopeError):
    """Waveform response too short to hold header and terminator."""

    def __init__(self, length: int) -> None:
        super().__init__(
            f"Waveform response of {length} bytes is shorter than the "
            f"{HEADER_SIZE + TERMINATOR_SIZE}-byte framing"
        )
        self.length = length


class FrameMismatch(ScopeError):
    """Payload holds more samples than the preamble reports."""
    pass


# === Configuration ===

def validate_signals(signals: Mapping[str, int]) -> None:
    """Raise if any signal is not mapped to a bit-plane 0-7."""
    for name, bit in signals.items():
        if isinstance(bit, bool) or not isinstance(bit, int) or not 0 <= bit <= 7:
            raise ScopeConfigurationError(
                f"Signal {name!r}: invalid bit-plane {bit!r} (expected 0-7)"
            )


@dataclass
class CaptureConfig:
    """Single capture session configuration."""
    source: str = "D0"             # D0 for the bottom 8 bits, D8 for upper
    signals: dict[str, int] = field(default_factory=lambda: dict(DEFAULT_SIGNALS))
    points: int = MAX_POINTS_PER_QUERY
    max_attempts: int = 60         # status polls before giving up
    poll_interval: float = 1.0     # s

    def __post_init__(self) -> None:
        if not isinstance(self.source, str):
            raise ScopeConfigurationError(f"source must be a string, got {self.source!r}")
        if not isinstance(self.signals, dict):
            raise ScopeConfigurationError(f"signals must be a mapping, got {self.signals!r}")
        for name in ("points", "max_attempts"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ScopeConfigurationError(f"{name} must be an integer, got {value!r}")
        if isinstance(self.poll_interval, bool) or not isinstance(self.poll_interval, (int, float)):
            raise ScopeConfigurationError(
                f"poll_interval must be a number, got {self.poll_interval!r}"
            )
        validate_signals(self.signals)
        if not 1 <= self.points <= MAX_POINTS_PER_QUERY:
            raise ScopeConfigurationError(
                f"points ({self.points}) must be in 1..{MAX_POINTS_PER_QUERY}"
            )
        if self.max_attempts < 1:
            raise ScopeConfigurationError(
                f"max_attempts ({self.max_attempts}) must be >= 1"
            )
        if self.poll_interval < 0:
            raise ScopeConfigurationError(
                f"poll_interval ({self.poll_interval}) must be >= 0"
            )


def save_config(config: CaptureConfig, filepath: str | Path) -> None:
    """Save capture configuration to JSON file."""
    filepath = Path(filepath)
    with filepath.open("w") as f:
        json.dump(asdict(config), f, indent=2)


def load_config(filepath: str | Path) -> CaptureConfig:
    """Load capture configuration from JSON file."""
    filepath = Path(filepath)
    with filepath.open() as f:
        data = json.load(f)

    known = {f.name for f in fields(CaptureConfig)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ScopeConfigurationError(
            f"Unknown config keys in {filepath}: {', '.join(unknown)}"
        )
    return CaptureConfig(**data)


# === Preamble ===

@dataclass(frozen=True)
class Preamble:
    """Waveform metadata from :WAV:PRE? (immutable)."""
    format: WaveformFormat
    acquisition_type: AcquisitionType
    points: int                    # number of points
    count: int                     # averages in AVER mode, 1 otherwise
    x_increment: float             # s between points
    x_origin: float                # s, start time of waveform
    x_reference: int               # reference sample index
    y_increment: float             # V per LSB
    y_origin: int                  # vertical offset
    y_reference: int               # vertical reference position

    def to_line(self) -> str:
        """Serialize back to the instrument's comma-separated form."""
        parts = []
        for name, _kind in _PREAMBLE_FIELDS:
            value = getattr(self, name)
            if isinstance(value, Enum):
                parts.append(str(value.value))
            elif isinstance(value, float):
                parts.append(f"{value:.6e}")
            else:
                parts.append(str(value))
        return ",".join(parts)

    def sample_time(self, index):
        """Time (s) of a sample index, or of an array of indices."""
        return (np.asarray(index) - self.x_reference) * self.x_increment + self.x_origin

    def time_axis(self, n_points: int | None = None) -> NDArray[np.float64]:
        """Generate time axis array."""
        if n_points is None:
            n_points = self.points
        return self.sample_time(np.arange(n_points))

    def to_voltage(self, payload: bytes) -> NDArray[np.float64]:
        """Convert analog channel bytes to volts."""
        raw = np.frombuffer(payload, dtype=np.uint8).astype(np.float64)
        return (raw - self.y_origin - self.y_reference) * self.y_increment


# Wire order of the preamble fields
_PREAMBLE_FIELDS: tuple[tuple[str, type], ...] = (
    ("format", WaveformFormat),
    ("acquisition_type", AcquisitionType),
    ("points", int),
    ("count", int),
    ("x_increment", float),
    ("x_origin", float),
    ("x_reference", int),
    ("y_increment", float),
    ("y_origin", int),
    ("y_reference", int),
)
_PREAMBLE_MINIMUMS = {"points": 0, "count": 1}


def _parse_field(kind: type, token: str):
    if issubclass(kind, Enum):
        return kind(int(token))
    return kind(token)


def parse_preamble(line: str) -> Preamble:
    """Parse a :WAV:PRE? response line.

    The line must carry exactly 10 comma-separated fields:
    format, type, points, count, xincrement, xorigin, xreference,
    yincrement, yorigin, yreference.

    Raises:
        MalformedPreamble: on the first missing, extra, or unparsable field.
    """
    parts = line.strip().split(",")
    values = {}
    for index, (name, kind) in enumerate(_PREAMBLE_FIELDS):
        if index >= len(parts):
            raise MalformedPreamble(index, "")
        token = parts[index].strip()
        try:
            value = _parse_field(kind, token)
        except ValueError as e:
            raise MalformedPreamble(index, token) from e
        minimum = _PREAMBLE_MINIMUMS.get(name)
        if minimum is not None and value < minimum:
            raise MalformedPreamble(index, token)
        values[name] = value

    if len(parts) > len(_PREAMBLE_FIELDS):
        extra = len(_PREAMBLE_FIELDS)
        raise MalformedPreamble(extra, parts[extra].strip())

    return Preamble(**values)


# === Waveform frame ===

@dataclass(frozen=True)
class WaveformFrame:
    """Raw :WAV:DATA? response split into header, payload and terminator."""
    header: bytes
    payload: bytes
    terminator: bytes

    @classmethod
    def from_response(cls, data: bytes) -> WaveformFrame:
        """Split a raw response; raises ShortRead if framing is incomplete."""
        if len(data) < HEADER_SIZE + TERMINATOR_SIZE:
            raise ShortRead(len(data))
        return cls(
            header=bytes(data[:HEADER_SIZE]),
            payload=bytes(data[HEADER_SIZE:-TERMINATOR_SIZE]),
            terminator=bytes(data[-TERMINATOR_SIZE:]),
        )

    def __len__(self) -> int:
        return len(self.payload)

    def samples(self) -> NDArray[np.uint8]:
        return np.frombuffer(self.payload, dtype=np.uint8)

    def check_points(self, preamble: Preamble) -> None:
        """Raise if the payload holds more samples than the preamble reports.

        A shorter payload is allowed: the fixed read window truncates it.
        """
        if len(self.payload) > preamble.points:
            raise FrameMismatch(
                f"Payload has {len(self.payload)} samples, "
                f"preamble reports {preamble.points}"
            )


# === Edge extraction ===

@dataclass(frozen=True)
class TransitionLog:
    """Transitions found in one logic-analyzer payload (immutable).

    transitions maps sample index -> raw byte at every index where the
    byte changed; index 0 is always present. last_change holds the most
    recent change index per signal, edges the full ordered history.
    """
    transitions: dict[int, int]
    last_change: dict[str, int]
    edges: dict[str, tuple[int, ...]]
    signals: dict[str, int]
    length: int

    def levels(self, name: str) -> NDArray[np.uint8]:
        """Logic level (0/1) of one signal at every sample."""
        bit = self.signals[name]
        if self.length == 0:
            return np.zeros(0, dtype=np.uint8)
        indices = np.fromiter(self.transitions.keys(), dtype=np.int64)
        values = np.fromiter(self.transitions.values(), dtype=np.uint8)
        positions = np.searchsorted(indices, np.arange(self.length), side="right") - 1
        return (values[positions] >> bit) & 1

    def edge_times(self, name: str, preamble: Preamble) -> NDArray[np.float64]:
        """Edge indices of one signal calibrated to seconds."""
        return preamble.sample_time(np.asarray(self.edges[name], dtype=np.int64))


def extract_edges(payload: bytes, signals: Mapping[str, int]) -> TransitionLog:
    """Find logic transitions in a byte-per-sample payload.

    Each payload byte packs D0-D7 (bit i = channel Di). The state before
    the first sample is all-zero, so a non-zero first byte is a transition
    at index 0. Signals whose bits flip within the same byte share that
    index.
    """
    validate_signals(signals)
    samples = np.frombuffer(payload, dtype=np.uint8)
    previous = np.zeros_like(samples)
    previous[1:] = samples[:-1]
    changed = samples ^ previous

    transitions: dict[int, int] = {0: 0x00}
    for index in np.flatnonzero(changed):
        transitions[int(index)] = int(samples[index])

    edges: dict[str, tuple[int, ...]] = {}
    last_change: dict[str, int] = {}
    for name, bit in signals.items():
        hits = np.flatnonzero((changed >> bit) & 1)
        edges[name] = tuple(int(i) for i in hits)
        if hits.size:
            last_change[name] = int(hits[-1])

    return TransitionLog(
        transitions=transitions,
        last_change=last_change,
        edges=edges,
        signals=dict(signals),
        length=int(samples.size),
    )


@dataclass(frozen=True)
class CaptureResult:
    """Everything decoded from one capture session."""
    frame: WaveformFrame
    preamble: Preamble
    log: TransitionLog


def save_capture(result: CaptureResult, filepath: str | Path) -> None:
    """Save a capture to a numpy .npz archive."""
    log = result.log
    edges = {
        f"edges_{name}": np.asarray(indices, dtype=np.int64)
        for name, indices in log.edges.items()
    }
    np.savez_compressed(
        filepath,
        raw=result.frame.samples(),
        time=result.preamble.time_axis(len(result.frame)),
        transition_index=np.fromiter(log.transitions.keys(), dtype=np.int64),
        transition_value=np.fromiter(log.transitions.values(), dtype=np.uint8),
        x_increment=result.preamble.x_increment,
        x_origin=result.preamble.x_origin,
        x_reference=result.preamble.x_reference,
        **edges,
    )


# === Transports ===

class Transport(ABC):
    """Blocking byte-stream channel to the instrument."""

    def __enter__(self) -> Transport:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    @abstractmethod
    def write(self, data: bytes) -> int:
        """Write bytes, return the number actually written."""
        ...

    @abstractmethod
    def read(self, max_bytes: int) -> bytes:
        """Read up to max_bytes."""
        ...

    @abstractmethod
    def close(self) -> None:
        ...


class VisaTransport(Transport):
    """VISA session, e.g. TCPIP::192.168.1.70::INSTR."""

    def __init__(self, address: str, timeout: float = 5.0) -> None:
        self._address = address if "::" in address else f"TCPIP::{address}::INSTR"
        self._logger = logging.getLogger(self.__class__.__name__)
        self._rm: pyvisa.ResourceManager | None = None
        self._resource: MessageBasedResource | None = None

        try:
            self._rm = pyvisa.ResourceManager()
            self._resource = self._rm.open_resource(
                self._address,
                resource_pyclass=MessageBasedResource,
            )
            self._resource.timeout = int(timeout * 1000)
        except pyvisa.Error as e:
            self.close()
            raise ScopeConnectionError(f"Connection failed: {self._address}") from e

        # Suppress pyvisa logging
        logging.getLogger("pyvisa").setLevel(logging.WARNING)
        self._logger.info(f"Opened {self._address}")

    def write(self, data: bytes) -> int:
        try:
            return self._resource.write_raw(data)
        except pyvisa.Error as e:
            raise TransportError(f"VISA write failed: {e}") from e

    def read(self, max_bytes: int) -> bytes:
        try:
            data, _status = self._resource.visalib.read(self._resource.session, max_bytes)
        except pyvisa.Error as e:
            raise TransportError(f"VISA read failed: {e}") from e
        return bytes(data)

    def close(self) -> None:
        if self._resource:
            self._resource.close()
        if self._rm:
            self._rm.close()
        self._resource = None
        self._rm = None


class UsbTransport(Transport):
    """Raw USB bulk endpoints of the instrument.

    The usbtmc kernel driver may hold the device; unload it
    (modprobe -r usbtmc) if opening fails with a busy error.
    """

    def __init__(
        self,
        vendor_id: int = DEFAULT_USB_VENDOR_ID,
        product_id: int = DEFAULT_USB_PRODUCT_ID,
        out_endpoint: int = 0x03,
        in_endpoint: int = 0x81,
        timeout: float = 5.0,
    ) -> None:
        self._out_endpoint = out_endpoint
        self._in_endpoint = in_endpoint
        self._timeout_ms = int(timeout * 1000)
        self._logger = logging.getLogger(self.__class__.__name__)

        try:
            self._device = usb.core.find(idVendor=vendor_id, idProduct=product_id)
        except usb.core.NoBackendError as e:
            self._device = None
            raise ScopeConnectionError("No libusb backend available") from e
        if self._device is None:
            raise ScopeConnectionError(
                f"Device not found: {vendor_id:04x}:{product_id:04x}"
            )
        try:
            self._device.set_configuration()
        except usb.core.USBError as e:
            self.close()
            raise ScopeConnectionError(
                f"Could not open device {vendor_id:04x}:{product_id:04x}"
            ) from e
        self._logger.info(f"Opened USB device {vendor_id:04x}:{product_id:04x}")

    def write(self, data: bytes) -> int:
        try:
            return self._device.write(self._out_endpoint, data, self._timeout_ms)
        except usb.core.USBError as e:
            raise TransportError(f"USB write failed: {e}") from e

    def read(self, max_bytes: int) -> bytes:
        try:
            data = self._device.read(self._in_endpoint, max_bytes, self._timeout_ms)
        except usb.core.USBError as e:
            raise TransportError(f"USB read failed: {e}") from e
        return bytes(data)

    def close(self) -> None:
        if self._device is not None:
            usb.util.dispose_resources(self._device)
        self._device = None


# === Scope ===

class RigolScope:
    """Rigol DS1000Z / MSO1000Z controller over an injected transport."""

    def __init__(self, transport: Transport) -> None:
        self._transport = transport
        self._logger = logging.getLogger(self.__class__.__name__)
        self.capture_state = CaptureState.IDLE

    @classmethod
    def over_visa(cls, address: str, timeout: float = 5.0) -> RigolScope:
        return cls(VisaTransport(address, timeout=timeout))

    @classmethod
    def over_usb(
        cls,
        vendor_id: int = DEFAULT_USB_VENDOR_ID,
        product_id: int = DEFAULT_USB_PRODUCT_ID,
    ) -> RigolScope:
        return cls(UsbTransport(vendor_id, product_id))

    def __enter__(self) -> RigolScope:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def close(self) -> None:
        """Release the transport."""
        if self._transport is not None:
            self._transport.close()
            self._transport = None
            self._logger.info("Disconnected")

    # === Low-level Communication ===

    def _ensure_connected(self) -> Transport:
        if self._transport is None:
            raise ScopeConnectionError("Not connected to scope")
        return self._transport

    def write(self, command: str) -> None:
        """Send one SCPI command; raises WriteError unless fully written."""
        transport = self._ensure_connected()
        data = command.encode("ascii")
        try:
            written = transport.write(data)
        except TransportError as e:
            raise WriteError(command, e) from e
        if written != len(data):
            raise WriteError(command, f"only {written} of {len(data)} bytes written")
        self._logger.debug(f"WRITE: {command}")

    def read(self, max_bytes: int) -> bytes:
        return self._ensure_connected().read(max_bytes)

    def query(self, command: str, max_bytes: int = STATUS_READ_SIZE) -> str:
        """Send SCPI query and return the first response line."""
        self.write(command)
        response = self.read(max_bytes)
        line = response.decode("ascii", errors="replace").split("\n")[0].strip()
        self._logger.debug(f"QUERY: {command} -> {line}")
        return line

    def send_commands(self, commands: Iterable[str]) -> None:
        """Write commands in order, stopping at the first failure."""
        for command in commands:
            self.write(command)

    def identify(self) -> str:
        idn = self.query("*IDN?")
        self._logger.info(f"Connected: {idn}")
        return idn

    # === Capture ===

    def trigger(self) -> None:
        """Configure channel 1, the LA pods and edge trigger, then arm."""
        self.send_commands(TRIGGER_SETUP)
        self.capture_state = CaptureState.ARMED
        self._logger.info("Armed single-shot capture")

    def wait_for_capture(self, max_attempts: int = 60, poll_interval: float = 1.0) -> None:
        """Poll trigger status until STOP.

        Raises:
            CaptureTimeout: after max_attempts polls without STOP.
        """
        self.capture_state = CaptureState.ARMED
        for attempt in range(1, max_attempts + 1):
            self.capture_state = CaptureState.POLLING
            time.sleep(poll_interval)
            status = self.query(STATUS_QUERY, STATUS_READ_SIZE)
            if status == "STOP":
                self.capture_state = CaptureState.STOPPED
                self._logger.info(f"Trigger detected after {attempt} polls")
                return

        self.capture_state = CaptureState.TIMEOUT
        raise CaptureTimeout(max_attempts)

    def fetch_waveform(self, source: str, points: int = MAX_POINTS_PER_QUERY) -> WaveformFrame:
        """Read raw sample memory of a source (D0 for bottom 8 bits, D8 for upper)."""
        if not 1 <= points <= MAX_POINTS_PER_QUERY:
            raise ScopeConfigurationError(
                f"points ({points}) must be in 1..{MAX_POINTS_PER_QUERY}"
            )
        self.send_commands([
            f":WAV:SOUR {source}",    # waveform source
            ":WAV:MODE RAW",          # all samples from memory, not just on screen
            ":WAV:FORM BYTE",
            ":WAV:STAR 1",
            f":WAV:STOP {points}",    # max per call
            ":WAV:DATA?",
        ])
        # The block is header + points + terminator; one read of the
        # protocol max returns it whole for any window size.
        data = self.read(MAX_POINTS_PER_QUERY)
        frame = WaveformFrame.from_response(data)
        self._logger.debug(f"Waveform header: {frame.header.hex(' ')}")
        self._logger.info(f"Fetched {len(frame)} samples from {source}")
        return frame

    def fetch_preamble(self) -> Preamble:
        line = self.query(PREAMBLE_QUERY, PREAMBLE_READ_SIZE)
        self._logger.debug(f"Raw preamble: {line}")
        return parse_preamble(line)

    def capture(self, config: CaptureConfig | None = None) -> CaptureResult:
        """Run one capture session and decode transitions."""
        config = config or CaptureConfig()
        validate_signals(config.signals)

        self.trigger()
        self.wait_for_capture(config.max_attempts, config.poll_interval)
        frame = self.fetch_waveform(config.source, config.points)
        preamble = self.fetch_preamble()

        frame.check_points(preamble)
        if len(frame) < preamble.points:
            self._logger.warning(
                f"Payload truncated: {len(frame)} of {preamble.points} points"
            )

        log = extract_edges(frame.payload, config.signals)
        self._logger.info(
            f"Decoded {len(log.transitions)} transitions, "
            f"x_increment={preamble.x_increment:.9f}s"
        )
        return CaptureResult(frame=frame, preamble=preamble, log=log)
