from typing import Annotated, Any, Literal

from pydantic import BeforeValidator, computed_field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing_extensions import Self

from shift_engine.domain.scheduling.value_objects.compliance import (
    ComplianceLimits,
    ComplianceRule,
)
from shift_engine.domain.scheduling.value_objects.time_window import (
    parse_time_of_day,
)


def parse_durations(v: Any) -> list[int] | str:
    if isinstance(v, str) and not v.startswith("["):
        return [int(i.strip()) for i in v.split(",") if i.strip()]
    elif isinstance(v, list | str):
        return v
    raise ValueError(v)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="SHIFT_ENGINE_",
        env_file=".env",
        env_ignore_empty=True,
        extra="ignore",
    )
    PROJECT_NAME: str = "shift-engine"
    ENVIRONMENT: Literal["local", "staging", "production"] = "local"

    # Observability
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: Literal["json", "console"] = "console"
    ENABLE_METRICS: bool = False
    METRICS_PORT: int = 9100

    # Shift-management backend
    BACKEND_BASE_URL: str = "http://localhost:3000/api"
    BACKEND_API_TOKEN: str | None = None
    BACKEND_TIMEOUT_SECONDS: float = 10.0

    # Compliance window for new or edited shifts
    COMPLIANCE_MIN_START: str = "06:00"
    COMPLIANCE_MAX_END: str = "22:00"
    COMPLIANCE_ALLOWED_DURATIONS: Annotated[
        list[int] | str, BeforeValidator(parse_durations)
    ] = [4, 6, 8, 10, 12]

    # Advisory schedule checks
    NIGHT_SHIFT_START_HOUR: int = 22
    NIGHT_SHIFT_END_HOUR: int = 6
    WEEKLY_HOUR_LIMIT: int = 40
    OVERTIME_SHIFT_HOURS: int = 8
    MIN_REST_HOURS: int = 8

    # Pre-filled window for the "new shift" form
    DEFAULT_SHIFT_START: str = "08:00"
    DEFAULT_SHIFT_END: str = "16:00"

    @model_validator(mode="after")
    def _validate_compliance_window(self) -> Self:
        for var_name in (
            "COMPLIANCE_MIN_START",
            "COMPLIANCE_MAX_END",
            "DEFAULT_SHIFT_START",
            "DEFAULT_SHIFT_END",
        ):
            value = getattr(self, var_name)
            if parse_time_of_day(value) is None:
                raise ValueError(f"{var_name} must be HH:MM, got {value!r}")

        if parse_time_of_day(self.COMPLIANCE_MIN_START) >= parse_time_of_day(
            self.COMPLIANCE_MAX_END
        ):
            raise ValueError("COMPLIANCE_MIN_START must be before COMPLIANCE_MAX_END")

        if not self.COMPLIANCE_ALLOWED_DURATIONS or any(
            hours <= 0 for hours in self.COMPLIANCE_ALLOWED_DURATIONS
        ):
            raise ValueError("COMPLIANCE_ALLOWED_DURATIONS must be positive hours")

        return self

    @computed_field  # type: ignore[prop-decorator]
    @property
    def compliance_rule(self) -> ComplianceRule:
        return ComplianceRule.from_strings(
            min_start=self.COMPLIANCE_MIN_START,
            max_end=self.COMPLIANCE_MAX_END,
            allowed_durations=self.COMPLIANCE_ALLOWED_DURATIONS,
        )

    @computed_field  # type: ignore[prop-decorator]
    @property
    def compliance_limits(self) -> ComplianceLimits:
        return ComplianceLimits(
            weekly_hour_limit=self.WEEKLY_HOUR_LIMIT,
            overtime_shift_hours=self.OVERTIME_SHIFT_HOURS,
            min_rest_hours=self.MIN_REST_HOURS,
        )


settings = Settings()  # type: ignore
