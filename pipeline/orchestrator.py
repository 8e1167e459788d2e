"""Matching pipeline orchestrator.

Runs once per ingested requisition:

    TRIGGERED -> REQUIREMENTS_EXTRACTED -> CANDIDATES_FILTERED -> SCORING -> DONE
        (any stage) -> ABORTED on a run-fatal error

Each candidate moves PENDING -> SCORED -> WRITTEN, or ends SKIPPED
(duplicate, vanished requisition, empty resume) or FAILED. A failed
candidate never stops its siblings.
"""

import enum
import logging
import threading
import time
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import List, Optional

from core.documents import FileSystemDocumentStore, TextExtractor, read_document_text
from core.matcher import (
    CandidateDTO,
    CandidateFilter,
    MatchScorer,
    RequirementExtractor,
    RequisitionDTO,
)
from core.matcher.candidate_filter import DEFAULT_HORIZON_DAYS
from core.referral import ReferralWriter
from database.uow import talent_uow

logger = logging.getLogger(__name__)

DEFAULT_MAX_CONCURRENT_SCORING = 4
DEFAULT_MAX_CONCURRENT_RUNS = 2


class Stage(str, enum.Enum):
    TRIGGERED = "TRIGGERED"
    REQUIREMENTS_EXTRACTED = "REQUIREMENTS_EXTRACTED"
    CANDIDATES_FILTERED = "CANDIDATES_FILTERED"
    SCORING = "SCORING"
    DONE = "DONE"
    ABORTED = "ABORTED"


class CandidateOutcome(str, enum.Enum):
    PENDING = "PENDING"
    SCORED = "SCORED"
    WRITTEN = "WRITTEN"
    SKIPPED = "SKIPPED"
    FAILED = "FAILED"


@dataclass
class CandidateResult:
    candidate_id: int
    outcome: CandidateOutcome = CandidateOutcome.PENDING
    score: Optional[int] = None
    referral_id: Optional[int] = None
    error: Optional[str] = None


@dataclass
class PipelineRunResult:
    """Result of one matching run for a requisition."""
    requisition_id: int
    stage: Stage = Stage.TRIGGERED
    required_experience: Optional[int] = None
    outcomes: List[CandidateResult] = field(default_factory=list)
    error: Optional[str] = None
    execution_time: float = 0.0

    @property
    def success(self) -> bool:
        return self.stage == Stage.DONE

    def _count(self, outcome: CandidateOutcome) -> int:
        return sum(1 for o in self.outcomes if o.outcome == outcome)

    @property
    def written_count(self) -> int:
        return self._count(CandidateOutcome.WRITTEN)

    @property
    def skipped_count(self) -> int:
        return self._count(CandidateOutcome.SKIPPED)

    @property
    def failed_count(self) -> int:
        return self._count(CandidateOutcome.FAILED)


class PipelineOrchestrator:
    def __init__(
        self,
        document_store: FileSystemDocumentStore,
        text_extractor: TextExtractor,
        requirement_extractor: RequirementExtractor,
        candidate_filter: CandidateFilter,
        scorer: MatchScorer,
        writer: Optional[ReferralWriter] = None,
        uow_factory=talent_uow,
        max_concurrent_scoring: int = DEFAULT_MAX_CONCURRENT_SCORING,
        max_concurrent_runs: int = DEFAULT_MAX_CONCURRENT_RUNS,
        horizon_days: int = DEFAULT_HORIZON_DAYS,
    ):
        self.store = document_store
        self.text_extractor = text_extractor
        self.requirement_extractor = requirement_extractor
        self.candidate_filter = candidate_filter
        self.scorer = scorer
        self.writer = writer or ReferralWriter(uow_factory=uow_factory)
        self.uow_factory = uow_factory
        self.max_concurrent_scoring = max(1, max_concurrent_scoring)
        self.horizon_days = horizon_days

        self._executor = ThreadPoolExecutor(
            max_workers=max(1, max_concurrent_runs),
            thread_name_prefix="pipeline-run"
        )
        self._lock = threading.Lock()
        self._accepting = True

    def handle_requisition_ingested(self, requisition_id: int) -> Future:
        """Schedule a run in the background and return its Future at once.

        Raises:
            RuntimeError: the orchestrator has been shut down
        """
        with self._lock:
            if not self._accepting:
                raise RuntimeError(
                    f"Orchestrator is shut down; trigger for requisition {requisition_id} refused"
                )
            logger.info(f"Scheduling matching run for requisition {requisition_id}")
            return self._executor.submit(self.run, requisition_id)

    def shutdown(self, wait: bool = True) -> None:
        """Stop accepting triggers and wait for in-flight runs."""
        with self._lock:
            self._accepting = False
        self._executor.shutdown(wait=wait)
        logger.info("Pipeline orchestrator stopped")

    def run(self, requisition_id: int) -> PipelineRunResult:
        """Run the matching pipeline for one requisition on the calling thread."""
        result = PipelineRunResult(requisition_id=requisition_id)
        run_start = time.time()

        logger.info("=" * 60)
        logger.info(f"MATCHING START for requisition {requisition_id}")
        logger.info("=" * 60)

        try:
            self._run_stages(result)
        except Exception as e:
            logger.exception(f"Error in matching pipeline for requisition {requisition_id}")
            result.stage = Stage.ABORTED
            result.error = str(e)

        result.execution_time = time.time() - run_start

        logger.info("=" * 60)
        logger.info(
            f"MATCHING {result.stage.value} for requisition {requisition_id}: "
            f"{result.written_count} written, {result.skipped_count} skipped, "
            f"{result.failed_count} failed in {result.execution_time:.2f}s"
        )
        logger.info("=" * 60)
        return result

    def _abort(self, result: PipelineRunResult, message: str) -> None:
        logger.error(message)
        result.stage = Stage.ABORTED
        result.error = message

    def _run_stages(self, result: PipelineRunResult) -> None:
        requisition_id = result.requisition_id

        # Step 1: Load requisition
        with self.uow_factory() as repo:
            row = repo.requisitions.get_by_id(requisition_id)
            requisition = RequisitionDTO.from_orm(row) if row is not None else None

        if requisition is None:
            self._abort(result, f"Requisition {requisition_id} not found after commit; run halted.")
            return

        # Step 2: Requisition text
        step_start = time.time()
        try:
            requisition_text = read_document_text(self.store, self.text_extractor, requisition.document_path)
        except Exception as e:
            self._abort(
                result,
                f"CRITICAL error during document parsing for requisition {requisition_id}. "
                f"Process halted. Error: {e}"
            )
            return

        # Step 3: Requirement extraction (fail-open)
        requirement = self.requirement_extractor.try_extract(requisition_text, requisition_id=requisition_id)
        result.required_experience = requirement.required_experience

        if requirement.extracted:
            with self.uow_factory() as repo:
                updated = repo.requisitions.set_required_experience(requisition_id, requirement.required_experience)
            if not updated:
                logger.info(f"Requisition {requisition_id} vanished before its requirement was stored.")
        else:
            logger.info(f"Keeping stored requirement for requisition {requisition_id}; extraction failed.")

        result.stage = Stage.REQUIREMENTS_EXTRACTED
        logger.info(f"Requirement step completed in {time.time() - step_start:.2f}s")

        # Step 4: Candidate pool and experience gate
        with self.uow_factory() as repo:
            pool = self.candidate_filter.select_pool(repo, horizon_days=self.horizon_days)
            eligible = self.candidate_filter.apply_experience_gate(pool, requirement.required_experience)
            candidates = [CandidateDTO.from_orm(c) for c in eligible]

        result.stage = Stage.CANDIDATES_FILTERED
        if not candidates:
            logger.warning(f"No eligible candidates found. Ending matching process for requisition {requisition_id}.")
            result.stage = Stage.DONE
            return

        # Step 5: Bounded concurrent scoring
        step_start = time.time()
        result.stage = Stage.SCORING
        result.outcomes = [CandidateResult(candidate_id=c.id) for c in candidates]
        logger.info(
            f"Scoring {len(candidates)} candidates with up to "
            f"{self.max_concurrent_scoring} concurrent inference calls"
        )

        with ThreadPoolExecutor(
            max_workers=min(self.max_concurrent_scoring, len(candidates)),
            thread_name_prefix=f"score-{requisition_id}"
        ) as pool_executor:
            futures = [
                pool_executor.submit(self._process_candidate, requisition, requisition_text, candidate, outcome)
                for candidate, outcome in zip(candidates, result.outcomes)
            ]
            for future in futures:
                future.result()

        logger.info(f"Scoring step completed in {time.time() - step_start:.2f}s")
        result.stage = Stage.DONE

    def _process_candidate(
        self,
        requisition: RequisitionDTO,
        requisition_text: str,
        candidate: CandidateDTO,
        outcome: CandidateResult,
    ) -> None:
        """Score and persist one candidate. Never raises."""
        logger.info(f"Processing candidate {candidate.id} - {candidate.full_name}")
        try:
            resume_text = read_document_text(self.store, self.text_extractor, candidate.resume_path)
            if not resume_text.strip():
                logger.warning(f"Skipping candidate {candidate.id}: resume has no extractable text.")
                outcome.outcome = CandidateOutcome.SKIPPED
                return

            match = self.scorer.score(requisition_text, resume_text)
            outcome.score = match.score
            outcome.outcome = CandidateOutcome.SCORED
            logger.info(f"LLM successful for candidate {candidate.id}. Score: {match.score}. Saving referral...")

            referral = self.writer.save(
                requisition_id=requisition.id,
                candidate_id=candidate.id,
                score=match.score,
                justification=match.justification,
                matching_skills=match.matching_skills,
            )
            if referral is None:
                outcome.outcome = CandidateOutcome.SKIPPED
            else:
                outcome.outcome = CandidateOutcome.WRITTEN
                outcome.referral_id = referral.id
        except Exception as e:
            logger.exception(f"Failed to process candidate {candidate.id} for requisition {requisition.id}")
            outcome.outcome = CandidateOutcome.FAILED
            outcome.error = str(e)
