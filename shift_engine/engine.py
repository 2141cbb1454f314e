"""
Engine wiring.

Builds the coordinator, template workflow and analysis services from
settings, around a single shift backend.
"""

from shift_engine.core.config import Settings, settings
from shift_engine.core.observability import initialize_observability
from shift_engine.domain.scheduling.repositories.shift_backend import ShiftBackend
from shift_engine.domain.scheduling.services import (
    BulkTemplateWorkflow,
    ComplianceValidator,
    ConflictDetector,
    ScheduleComplianceService,
    ScheduleViewService,
    ShiftOperationCoordinator,
    StatsAggregator,
    WeekCopyService,
)
from shift_engine.infrastructure.backends import HttpShiftBackend


class ShiftEngine:
    """Entry point bundling the engine's services over one backend."""

    def __init__(self, backend: ShiftBackend, config: Settings | None = None) -> None:
        config = config or settings
        self.backend = backend
        self.settings = config

        self.compliance_rule = config.compliance_rule
        self.validator = ComplianceValidator(self.compliance_rule)
        self.conflict_detector = ConflictDetector()
        self.stats_aggregator = StatsAggregator(
            night_start_hour=config.NIGHT_SHIFT_START_HOUR,
            night_end_hour=config.NIGHT_SHIFT_END_HOUR,
        )
        self.compliance_service = ScheduleComplianceService(config.compliance_limits)
        self.view_service = ScheduleViewService(
            conflict_detector=self.conflict_detector,
            stats_aggregator=self.stats_aggregator,
            compliance_service=self.compliance_service,
        )
        self.coordinator = ShiftOperationCoordinator(
            backend,
            self.compliance_rule,
            validator=self.validator,
            view_service=self.view_service,
            conflict_detector=self.conflict_detector,
        )
        self.templates = BulkTemplateWorkflow(
            backend,
            self.compliance_rule,
            coordinator=self.coordinator,
            validator=self.validator,
        )
        self.week_copy = WeekCopyService()

    @property
    def default_shift_window(self) -> tuple[str, str]:
        """Start and end pre-filled for a new shift."""
        return self.settings.DEFAULT_SHIFT_START, self.settings.DEFAULT_SHIFT_END


def create_shift_engine(
    backend: ShiftBackend | None = None, config: Settings | None = None
) -> ShiftEngine:
    """
    Build an engine; defaults to the HTTP backend configured in settings.

    Configures logging and metrics on first use.
    """
    config = config or settings
    initialize_observability(config)
    if backend is None:
        backend = HttpShiftBackend(
            base_url=config.BACKEND_BASE_URL,
            api_token=config.BACKEND_API_TOKEN,
            timeout_seconds=config.BACKEND_TIMEOUT_SECONDS,
        )
    return ShiftEngine(backend, config)
