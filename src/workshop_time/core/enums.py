from __future__ import annotations

from enum import Enum


class ActivityKind(str, Enum):
    """Loại hoạt động lồng trong ca có mặt."""

    BREAK = "break"
    WORK = "work"


class ClockMethod(str, Enum):
    """Kênh ghi nhận sự kiện (web, kiosk, nhập tay)."""

    MANUAL = "manual"
    WEB = "web"
    KIOSK = "kiosk"


class PresenceState(str, Enum):
    ABSENT = "absent"
    PRESENT = "present"
    PRESENT_ACTIVE = "present_active"


class ActivityState(str, Enum):
    IDLE = "idle"
    ON_BREAK = "on_break"
    WORKING = "working"


class Period(str, Enum):
    TODAY = "today"
    WEEK = "week"
    MONTH = "month"


class ErrorKind(str, Enum):
    """Typed failure kinds returned by the engine."""

    ALREADY_PRESENT = "AlreadyPresent"
    NOT_PRESENT = "NotPresent"
    ACTIVE_SUB_ACTIVITY = "ActiveSubActivity"
    ALREADY_ON_BREAK = "AlreadyOnBreak"
    ALREADY_WORKING = "AlreadyWorking"
    NO_ACTIVE_BREAK = "NoActiveBreak"
    NO_ACTIVE_WORK = "NoActiveWork"
    INVALID_INTERVAL = "InvalidInterval"
    UNKNOWN_TARGET = "UnknownTarget"
    BUSY = "Busy"
    STORE_FAILURE = "StoreFailure"


class IdentifierKind(str, Enum):
    EMPLOYEE_NUMBER = "employee_number"
    PIN = "pin"
    RFID = "rfid"
    QR = "qr"
