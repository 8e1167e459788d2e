from dataclasses import dataclass
from typing import Dict

from core.config_loader import AppConfig, LlmConfig
from core.documents import FileSystemDocumentStore, TextExtractor
from core.llm.interfaces import LLMProvider
from core.llm.openai_service import OpenAIService
from core.llm.prompts import PromptTemplate, load_prompt_templates
from core.matcher import CandidateFilter, MatchScorer, RequirementExtractor, SkillExtractor
from core.referral import ReferralStateMachine, ReferralWriter
from pipeline.events import RequisitionEventQueue
from pipeline.orchestrator import PipelineOrchestrator
from services.candidate_service import CandidateService
from services.requisition_service import RequisitionService


@dataclass
class AppContext:
    """Application context container that holds all wired dependencies.

    This eliminates duplicate wiring code and provides a single source
    of truth for service instantiation. DB access should be obtained
    via talent_uow() inside each operation.
    """
    config: AppConfig
    ai_service: LLMProvider
    prompts: Dict[str, PromptTemplate]
    document_store: FileSystemDocumentStore
    orchestrator: PipelineOrchestrator
    events: RequisitionEventQueue
    state_machine: ReferralStateMachine
    requisition_service: RequisitionService
    candidate_service: CandidateService

    @classmethod
    def build(cls, config: AppConfig, ai_service: LLMProvider = None) -> "AppContext":
        """Build an AppContext from config.

        Args:
            config: Loaded application configuration
            ai_service: Inference client to use instead of the configured OpenAI one

        Returns:
            Fully wired AppContext instance (event consumer not started)
        """
        if ai_service is None:
            ai_service = cls._build_ai_service(config.llm)

        prompts = load_prompt_templates(config.matching.prompts_file)
        document_store = FileSystemDocumentStore(config.storage.root)
        text_extractor = TextExtractor()

        orchestrator = PipelineOrchestrator(
            document_store=document_store,
            text_extractor=text_extractor,
            requirement_extractor=RequirementExtractor(ai_service, prompts),
            candidate_filter=CandidateFilter(config.matching.availability_horizon_days),
            scorer=MatchScorer(ai_service, prompts),
            writer=ReferralWriter(),
            max_concurrent_scoring=config.matching.max_concurrent_scoring,
            max_concurrent_runs=config.pipeline.max_concurrent_runs,
            horizon_days=config.matching.availability_horizon_days,
        )
        events = RequisitionEventQueue(handler=orchestrator.handle_requisition_ingested)
        state_machine = ReferralStateMachine()

        return cls(
            config=config,
            ai_service=ai_service,
            prompts=prompts,
            document_store=document_store,
            orchestrator=orchestrator,
            events=events,
            state_machine=state_machine,
            requisition_service=RequisitionService(document_store, events=events, state_machine=state_machine),
            candidate_service=CandidateService(
                document_store,
                text_extractor,
                SkillExtractor(ai_service, prompts),
            ),
        )

    @staticmethod
    def _build_ai_service(llm_config: LlmConfig) -> OpenAIService:
        """Build OpenAI service from LLM configuration."""
        model_config = {
            'model': llm_config.model,
            'temperature': llm_config.temperature,
            'request_timeout_seconds': llm_config.request_timeout_seconds,
            'max_retries': llm_config.max_retries,
        }

        return OpenAIService(
            api_key=llm_config.api_key,
            base_url=llm_config.base_url,
            model_config=model_config,
        )

    def start(self) -> None:
        self.events.start()

    def close(self) -> None:
        """Stop the event consumer, then wait for in-flight matching runs."""
        self.events.close()
        self.orchestrator.shutdown()
