from pydantic import BaseModel, Field, model_validator
from pydantic_settings import BaseSettings

# Weights must add up to 1 within this tolerance
WEIGHT_SUM_TOLERANCE = 1e-6


class RiskPolicy(BaseModel):
    """Tunable constants of the spoilage risk formula.

    Passed explicitly into the calculator and classifier so a policy change
    never requires touching call sites.  Override any field through the
    environment, e.g. ``RISK_POLICY__OPTIMAL_TEMPERATURE_C=4``.
    """

    # ── Factor weights ───────────────────────────────────────
    weight_shelf_life: float = Field(0.40, ge=0)
    weight_temperature: float = Field(0.25, ge=0)
    weight_humidity: float = Field(0.15, ge=0)
    weight_gas: float = Field(0.20, ge=0)

    # ── Optimal storage conditions ───────────────────────────
    optimal_temperature_c: float = 10.0
    optimal_humidity_pct: float = 65.0

    # ── Sensitivity multipliers (points per unit of deviation) ─
    # 8 saturates the temperature sub-score at 12.5 °C deviation
    temperature_sensitivity: float = Field(8.0, gt=0)
    humidity_sensitivity: float = Field(4.0, gt=0)

    # ── Deviations assumed when a sensor is missing ──────────
    default_temperature_deviation: float = Field(5.0, ge=0)
    default_humidity_deviation: float = Field(10.0, ge=0)

    # ── Tier bands: fresh <= fresh_max < moderate <= moderate_max < high
    fresh_max_score: int = 30
    moderate_max_score: int = 70

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def weights_and_bands_consistent(self):
        total = (
            self.weight_shelf_life
            + self.weight_temperature
            + self.weight_humidity
            + self.weight_gas
        )
        if abs(total - 1.0) > WEIGHT_SUM_TOLERANCE:
            raise ValueError(f"Risk factor weights must sum to 1.0 (got {total:.4f})")
        if not 0 <= self.fresh_max_score < self.moderate_max_score <= 100:
            raise ValueError(
                "Tier thresholds must satisfy 0 <= fresh_max_score < moderate_max_score <= 100"
            )
        return self


class Settings(BaseSettings):
    # App
    environment: str = "development"
    debug: bool = True
    allowed_origins: str = "http://localhost:3000,http://localhost:5173"
    log_level: str = "INFO"

    # Scoring policy
    risk_policy: RiskPolicy = RiskPolicy()

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "env_nested_delimiter": "__",
    }


settings = Settings()


def get_risk_policy() -> RiskPolicy:
    """FastAPI dependency returning the active scoring policy."""
    return settings.risk_policy
