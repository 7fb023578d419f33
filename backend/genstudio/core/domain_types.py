"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - TurnId and CorrelationId wrap str — never pass bare strings where an id is meant
    - All valid states encoded as Enums — no raw string matching

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders (snapshot + HTTP payloads)
"""

from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

TurnId = NewType("TurnId", str)
CorrelationId = NewType("CorrelationId", str)


# ─── Enums ───────────────────────────────────────────────────────

class Role(str, Enum):
    """Author of a conversation turn."""
    USER = "user"
    ASSISTANT = "assistant"
    SYSTEM = "system"


class GenerationStep(str, Enum):
    """Visible status of the session controller.

    idle -> thinking -> coding -> idle; the error path returns to idle
    straight from thinking or coding.
    """
    IDLE = "idle"
    THINKING = "thinking"
    CODING = "coding"
