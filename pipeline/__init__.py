"""Pipeline execution modules for ReferralScout."""

from .orchestrator import PipelineOrchestrator, PipelineRunResult, Stage, CandidateOutcome, CandidateResult
from .events import RequisitionEventQueue

__all__ = [
    'PipelineOrchestrator', 'PipelineRunResult', 'Stage', 'CandidateOutcome', 'CandidateResult',
    'RequisitionEventQueue',
]
