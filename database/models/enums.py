import enum


class RequisitionStatus(str, enum.Enum):
    OPEN = "OPEN"
    CLOSED = "CLOSED"


class AvailabilityStatus(str, enum.Enum):
    AVAILABLE = "AVAILABLE"
    ON_PROJECT = "ON_PROJECT"
    RESERVED = "RESERVED"


class ReferralStatus(str, enum.Enum):
    PENDING_REVIEW = "PENDING_REVIEW"
    SELECTED = "SELECTED"
    RESERVED = "RESERVED"
    REJECTED = "REJECTED"


# Referral statuses that hold a candidate (at most one per candidate)
ACTIVE_REFERRAL_STATUSES = (ReferralStatus.SELECTED, ReferralStatus.RESERVED)

# Candidate availabilities that mean "engaged elsewhere"
BUSY_AVAILABILITIES = (AvailabilityStatus.ON_PROJECT, AvailabilityStatus.RESERVED)
