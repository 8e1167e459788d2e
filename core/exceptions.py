"""
Exception hierarchy for ReferralScout.

Pipeline code absorbs document and inference errors per candidate; the
referral decision errors are raised to the synchronous caller.
"""


class ReferralScoutError(Exception):
    """Base exception for all ReferralScout errors."""
    pass


# --- Documents ---

class DocumentError(ReferralScoutError):
    """Raised when a stored document cannot be used."""
    pass


class DocumentNotFoundError(DocumentError):
    """Raised when a document path does not resolve to a readable file."""
    pass


class DocumentStorageError(DocumentError):
    """Raised when a document cannot be written to the store."""
    pass


class UnsupportedFormatError(DocumentError):
    """Raised when no text extractor exists for a format hint."""
    pass


class DocumentParseError(DocumentError):
    """Raised when a document of a supported format fails to parse."""
    pass


# --- Inference service ---

class InferenceError(ReferralScoutError):
    """Raised when the inference service cannot produce a usable answer."""
    pass


class TransportError(InferenceError):
    """Raised when the inference service is unreachable or fails."""
    pass


class RateLimitedError(InferenceError):
    """Raised when the inference service keeps rejecting calls for rate limits."""
    pass


class InferenceResponseError(InferenceError):
    """Raised when the inference reply is not the JSON object we asked for."""
    pass


# --- Lookups ---

class RequisitionNotFoundError(ReferralScoutError):
    pass


class CandidateNotFoundError(ReferralScoutError):
    pass


# --- Referral decisions ---

class ReferralDecisionError(ReferralScoutError):
    """Base class for failures of a reviewer decision."""
    pass


class ReferralNotFoundError(ReferralDecisionError):
    pass


class InvalidTransitionError(ReferralDecisionError):
    """Raised when the requested status is not a reviewer decision."""
    pass


class CandidateAlreadyEngagedError(ReferralDecisionError):
    """Raised when a candidate already holds another active referral."""
    pass


class DecisionPersistenceError(ReferralDecisionError):
    """Raised when the referral/candidate write pair could not commit."""
    pass
