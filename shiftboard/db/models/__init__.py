from shiftboard.db.database import Base

# Import models
from shiftboard.db.models.profiles import Profiles
from shiftboard.db.models.credentials import Credentials
from shiftboard.db.models.week_requests import WeekRequests
from shiftboard.db.models.swap_requests import SwapRequests
from shiftboard.db.models.manual_assignments import ManualAssignments
from shiftboard.db.models.week_deadlines import WeekDeadlines
from shiftboard.services.rules.types import Role, RequestStatus, SwapStatus

__all__ = [
    "Base",
    # Models
    "Profiles",
    "Credentials",
    "WeekRequests",
    "SwapRequests",
    "ManualAssignments",
    "WeekDeadlines",
    # Enums
    "Role",
    "RequestStatus",
    "SwapStatus",
]
