# =============================================================================
# daycare_core/offline/models.py
# Data models shared by the local store, the cloud mirror and the UI
# =============================================================================
"""
Entity dataclasses.

Every entity is persisted as a JSON object with snake_case keys. Loading is
lenient: unknown keys are ignored and missing keys take their defaults, so
rows written by older app versions load cleanly.
"""

from __future__ import annotations
import uuid
from dataclasses import dataclass, field, fields, asdict
from enum import Enum
from typing import Any, Dict, List, Optional, Type, TypeVar


T = TypeVar("T", bound="Record")


def new_id() -> str:
    """Generate a random record id."""
    return uuid.uuid4().hex


def daily_log_id(child_id: str, date: str) -> str:
    """Deterministic id of the daily log for (child, date)."""
    return f"{child_id}_{date}"


# =============================================================================
# ENUMERATIONS
# =============================================================================

class LogStatus(str, Enum):
    IN_PROGRESS = "In Progress"
    COMPLETED = "Completed"
    SENT = "Sent"


class Mood(str, Enum):
    GREAT = "Great"
    GOOD = "Good"
    OKAY = "Okay"
    NOT_GREAT = "Not Great"


class Relationship(str, Enum):
    MOM = "Mom"
    DAD = "Dad"
    GUARDIAN = "Guardian"


class Language(str, Enum):
    ENGLISH = "English"
    URDU = "Urdu"
    PUNJABI = "Punjabi"


class HolidayType(str, Enum):
    CLOSED = "Closed"
    HALF_DAY = "Half Day"
    BREAK = "Break"


class SendStatus(str, Enum):
    SENT = "Sent"
    FAILED = "Failed"


class SendMethod(str, Enum):
    RELAY = "relay"
    MAILTO = "mailto"


MEAL_TYPES = ["Breakfast", "Lunch", "Snack", "Other"]
MEAL_AMOUNTS = ["All", "Most", "Some", "Little"]
BOTTLE_TYPES = ["Milk", "Formula", "Water", "Other"]
NAP_QUALITIES = ["Great", "Okay", "Restless"]
DIAPER_TYPES = ["Wet", "BM", "Both", "Potty"]
INCIDENT_TYPES = ["Bump", "Scratch", "Behavior", "Medical", "Other"]

DEFAULT_ARRIVAL_TIME = "08:00"
DEFAULT_DEPARTURE_TIME = "17:30"


# =============================================================================
# BASE RECORD
# =============================================================================

class Record:
    """Mixin giving dataclasses lenient dict (de)serialization."""

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        for key, value in data.items():
            if isinstance(value, Enum):
                data[key] = value.value
        return data

    @classmethod
    def from_dict(cls: Type[T], data: Optional[Dict[str, Any]]) -> T:
        data = data or {}
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known and v is not None})


# =============================================================================
# SUB-ENTRIES OF A DAILY LOG
# =============================================================================

@dataclass
class MealEntry(Record):
    id: str = field(default_factory=new_id)
    time: str = ""
    type: str = "Breakfast"
    items: str = ""
    amount: str = "All"
    notes: str = ""


@dataclass
class BottleEntry(Record):
    id: str = field(default_factory=new_id)
    time: str = ""
    type: str = "Milk"
    amount: str = ""
    notes: str = ""


@dataclass
class NapEntry(Record):
    id: str = field(default_factory=new_id)
    start_time: str = ""
    end_time: str = ""
    quality: str = "Great"
    notes: str = ""


@dataclass
class DiaperEntry(Record):
    id: str = field(default_factory=new_id)
    time: str = ""
    type: str = "Wet"
    notes: str = ""


@dataclass
class ActivityEntry(Record):
    id: str = field(default_factory=new_id)
    time: str = ""
    category: str = ""
    description: str = ""
    notes: str = ""


@dataclass
class MedicationEntry(Record):
    id: str = field(default_factory=new_id)
    time: str = ""
    name: str = ""
    dosage: str = ""
    notes: str = ""


@dataclass
class IncidentEntry(Record):
    id: str = field(default_factory=new_id)
    time: str = ""
    type: str = "Other"
    description: str = ""
    action_taken: str = ""
    parent_notified: bool = False


# Sub-collection name -> entry class
ENTRY_TYPES: Dict[str, Type[Record]] = {
    "meals": MealEntry,
    "bottles": BottleEntry,
    "naps": NapEntry,
    "diapers": DiaperEntry,
    "activities": ActivityEntry,
    "medications": MedicationEntry,
    "incidents": IncidentEntry,
}


# =============================================================================
# ENTITIES
# =============================================================================

@dataclass
class Child(Record):
    id: str = field(default_factory=new_id)
    first_name: str = ""
    last_name: str = ""
    nickname: str = ""
    dob: str = ""
    classroom: str = ""
    allergies: str = ""
    dietary_notes: str = ""
    nap_notes: str = ""
    emergency_notes: str = ""
    daily_medications: List[str] = field(default_factory=list)
    parent_ids: List[str] = field(default_factory=list)
    active: bool = True

    @property
    def display_name(self) -> str:
        name = f"{self.first_name} {self.last_name}".strip()
        if self.nickname:
            name += f" ({self.nickname})"
        return name


@dataclass
class Parent(Record):
    id: str = field(default_factory=new_id)
    full_name: str = ""
    email: str = ""
    phone: str = ""
    relationship: str = Relationship.MOM.value
    preferred_language: str = Language.ENGLISH.value
    receives_email: bool = True


@dataclass
class DailyLog(Record):
    """One child's record for one calendar day."""
    child_id: str = ""
    date: str = ""
    id: str = ""
    arrival_time: str = DEFAULT_ARRIVAL_TIME
    departure_time: str = DEFAULT_DEPARTURE_TIME
    is_present: bool = False
    status: str = LogStatus.IN_PROGRESS.value
    overall_mood: str = Mood.GREAT.value
    teacher_notes: str = ""
    activity_notes: str = ""
    supplies_needed: str = ""
    include_trends: bool = False
    meals: List[Dict[str, Any]] = field(default_factory=list)
    bottles: List[Dict[str, Any]] = field(default_factory=list)
    naps: List[Dict[str, Any]] = field(default_factory=list)
    diapers: List[Dict[str, Any]] = field(default_factory=list)
    activities: List[Dict[str, Any]] = field(default_factory=list)
    medications: List[Dict[str, Any]] = field(default_factory=list)
    incidents: List[Dict[str, Any]] = field(default_factory=list)

    def __post_init__(self):
        if not self.id and self.child_id and self.date:
            self.id = daily_log_id(self.child_id, self.date)
        if isinstance(self.status, LogStatus):
            self.status = self.status.value

    @classmethod
    def blank(cls, child_id: str, date: str) -> DailyLog:
        """A fresh, absent, In Progress log with placeholder times."""
        return cls(child_id=child_id, date=date)

    def entries(self, kind: str) -> List[Record]:
        """Typed view of one sub-collection."""
        entry_cls = ENTRY_TYPES[kind]
        return [entry_cls.from_dict(e) for e in getattr(self, kind)]


@dataclass
class Holiday(Record):
    id: str = field(default_factory=new_id)
    name: str = ""
    date: str = ""
    type: str = HolidayType.CLOSED.value
    notes: str = ""


@dataclass
class EmailSendLog(Record):
    id: str = field(default_factory=new_id)
    daily_log_id: str = ""
    sent_to: List[str] = field(default_factory=list)
    subject: str = ""
    sent_at: str = ""
    status: str = SendStatus.SENT.value
    method: str = SendMethod.RELAY.value
    error_message: str = ""


DEFAULT_ADMIN_PASSWORD = "honeybees2025"

# Device-local settings never written to the cloud mirror
LOCAL_ONLY_SETTINGS = ("cloud_url", "cloud_key")


@dataclass
class Settings(Record):
    daycare_name: str = "Honeybees Daycare"
    from_email: str = "reports@honeybeesdaycare.com"
    email_signature: str = "With love,\nHoneybees Daycare Team"
    test_email: str = ""
    admin_password: str = DEFAULT_ADMIN_PASSWORD
    auto_send_time: str = "17:00"
    send_copy_to_self_default: bool = False
    emailjs_service_id: str = ""
    emailjs_template_id: str = ""
    emailjs_public_key: str = ""
    cloud_url: str = ""
    cloud_key: str = ""

    @property
    def relay_configured(self) -> bool:
        return bool(
            self.emailjs_service_id and self.emailjs_template_id and self.emailjs_public_key
        )

    def shareable(self) -> Dict[str, Any]:
        """Settings as they may be pushed to the mirror (no credentials)."""
        data = self.to_dict()
        for key in LOCAL_ONLY_SETTINGS:
            data.pop(key, None)
        return data
