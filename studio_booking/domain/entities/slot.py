from __future__ import annotations

from dataclasses import dataclass
from datetime import date, time
from enum import Enum


class SlotState(str, Enum):
    available = "available"
    booked = "booked"
    past = "past"


@dataclass(frozen=True)
class Slot:
    date: date
    time: time
    state: SlotState
