"""Low-level terminal input decoding.

Reads raw bytes from stdin and translates them into ``KeyEvent`` values.
Handles ESC-sequence timing, xterm modifier parameters, and UTF-8 input.
"""

from __future__ import annotations

import os
import select

from .keys import BACKSPACE, DOWN, ENTER, ESC, LEFT, RIGHT, TAB, UP, KeyEvent

ESC_SEQUENCE_TIMEOUT_MS = 25
_PENDING_BYTES: list[bytes] = []

_CSI_FINAL_KEYS = {
    b"A": UP,
    b"B": DOWN,
    b"C": RIGHT,
    b"D": LEFT,
}


def _read_ready_byte(fd: int, timeout_ms: int) -> bytes | None:
    ready, _, _ = select.select([fd], [], [], max(0.0, timeout_ms / 1000.0))
    if not ready:
        return None
    ch = os.read(fd, 1)
    if not ch:
        return None
    return ch


def _utf8_length(lead: int) -> int:
    if lead >= 0xF0:
        return 4
    if lead >= 0xE0:
        return 3
    if lead >= 0xC0:
        return 2
    return 1


def _read_utf8_char(fd: int, lead: bytes) -> str:
    data = lead
    for _ in range(_utf8_length(lead[0]) - 1):
        nxt = _read_ready_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
        if nxt is None:
            break
        data += nxt
    return data.decode("utf-8", errors="replace")


def _modified_event(key: str, param: int) -> KeyEvent:
    """Decode an xterm modifier parameter (``1 + shift + 2*alt + 4*ctrl + 8*meta``)."""
    bits = max(0, param - 1)
    return KeyEvent(
        key,
        shift=bool(bits & 1),
        alt=bool(bits & 2),
        ctrl=bool(bits & 4),
        meta=bool(bits & 8),
    )


def _read_csi(fd: int) -> KeyEvent:
    params = b""
    while True:
        part = _read_ready_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
        if part is None:
            return KeyEvent(ESC)
        if part.isdigit() or part == b";":
            params += part
            if len(params) > 16:
                return KeyEvent(ESC)
            continue
        final = part
        break

    if final == b"Z":
        return KeyEvent(TAB, shift=True)
    key = _CSI_FINAL_KEYS.get(final)
    if key is None:
        return KeyEvent(ESC)
    fields = params.split(b";")
    if len(fields) == 2 and fields[1].isdigit():
        return _modified_event(key, int(fields[1]))
    return KeyEvent(key)


def decode_control_byte(ch: bytes) -> KeyEvent | None:
    """Map single control bytes to events; ``None`` for everything else."""
    if ch == b"\t":
        return KeyEvent(TAB)
    if ch in {b"\x08", b"\x7f"}:
        return KeyEvent(BACKSPACE)
    if ch in {b"\r", b"\n"}:
        return KeyEvent(ENTER)
    code = ch[0]
    if 1 <= code <= 26:
        return KeyEvent(chr(code + 96), ctrl=True)
    return None


def read_key(fd: int, timeout_ms: int | None = None) -> KeyEvent | None:
    """Read one key event; ``None`` on timeout or end of input."""
    if _PENDING_BYTES:
        ch = _PENDING_BYTES.pop(0)
    else:
        if timeout_ms is not None:
            ready, _, _ = select.select([fd], [], [], max(0.0, timeout_ms / 1000.0))
            if not ready:
                return None

        ch = os.read(fd, 1)
        if not ch:
            return None

    if ch != b"\x1b":
        control = decode_control_byte(ch)
        if control is not None:
            return control
        return KeyEvent(_read_utf8_char(fd, ch))

    # Escape, CSI sequences, and Alt+key.
    seq = _read_ready_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
    if seq is None:
        return KeyEvent(ESC)
    if seq == b"[":
        return _read_csi(fd)
    if seq == b"O":
        final = _read_ready_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
        key = _CSI_FINAL_KEYS.get(final or b"")
        return KeyEvent(key) if key is not None else KeyEvent(ESC)
    if seq == b"\x1b":
        _PENDING_BYTES.append(seq)
        return KeyEvent(ESC)
    control = decode_control_byte(seq)
    if control is not None:
        return KeyEvent(control.key, shift=control.shift, ctrl=control.ctrl, alt=True)
    return KeyEvent(_read_utf8_char(fd, seq), alt=True)
