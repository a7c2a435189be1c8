"""Request contracts for the simulation endpoints."""

from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from investsim.core.chart import RiskScenario
from investsim.core.config import Settings
from investsim.core.constants import MAX_PRICE_RUB
from investsim.core.presets import ScenarioPreset, get_preset
from investsim.core.simulation import ObjectInputs, SimulationInput


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


class ObjectRequest(BaseModel):
    """Inputs of one property; out-of-range values are clamped, non-finite or oversized prices rejected."""

    model_config = ConfigDict(extra="forbid", allow_inf_nan=False)

    price: float = Field(default=10_000_000, le=MAX_PRICE_RUB)
    down_percent: float = 20
    rate_percent: float = 18
    term_years: int = 20
    rental_yield_percent: float = 6

    @field_validator("price")
    @classmethod
    def clamp_price(cls, v: float) -> float:
        return max(0.0, v)

    @field_validator("down_percent", "rate_percent")
    @classmethod
    def clamp_percent(cls, v: float) -> float:
        return _clamp(v, 0, 100)

    @field_validator("term_years")
    @classmethod
    def clamp_term(cls, v: int) -> int:
        return int(_clamp(v, 1, 30))

    @field_validator("rental_yield_percent")
    @classmethod
    def clamp_yield(cls, v: float) -> float:
        return _clamp(v, 0, 20)


class SimulationRequest(ObjectRequest):
    deposit_rate: Optional[float] = Field(default=None, ge=0, le=1, description="Deposit rate as a decimal.")
    appreciation_percent: Optional[float] = Field(default=None, ge=-50, le=100)
    rent_inflation_rate: Optional[float] = Field(default=None, ge=0, le=1)
    risk_scenario: RiskScenario = RiskScenario.NONE
    # apply a named preset to price / down payment / rate / term
    scenario: Optional[str] = None
    compare_with: Optional[str] = None
    object_b: Optional[ObjectRequest] = None
    zero_point_sync: bool = False
    initial_total_capital: Optional[float] = Field(default=None, gt=0, le=MAX_PRICE_RUB)
    deposit_withdrawals: bool = True
    locale: Optional[Literal["ru", "en"]] = None

    @field_validator("scenario", "compare_with")
    @classmethod
    def known_preset(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        try:
            return get_preset(v).key.value
        except KeyError:
            raise ValueError(f"unknown preset '{v}'") from None

    @model_validator(mode="after")
    def apply_scenario(self) -> "SimulationRequest":
        if self.scenario is not None:
            preset = get_preset(self.scenario)
            self.price = preset.price
            self.down_percent = preset.down_percent
            self.rate_percent = preset.rate_percent
            self.term_years = preset.term_years
        return self

    def to_simulation_input(self, settings: Settings) -> SimulationInput:
        """
        Resolve omitted rates so the core receives a complete parameter set.

        A named ``scenario`` supplies its rate profile (deposit rate, price
        growth); anything still missing falls back to ``settings``.
        """
        compare_preset: Optional[ScenarioPreset] = get_preset(self.compare_with) if self.compare_with else None
        deposit_rate = settings.DEFAULT_DEPOSIT_RATE
        appreciation_percent = settings.DEFAULT_APPRECIATION_PERCENT
        if self.scenario is not None:
            rates = get_preset(self.scenario).rates
            deposit_rate = rates.deposit_rate
            appreciation_percent = rates.price_growth
        if self.deposit_rate is not None:
            deposit_rate = self.deposit_rate
        if self.appreciation_percent is not None:
            appreciation_percent = self.appreciation_percent

        object_b = None
        if self.object_b is not None:
            object_b = ObjectInputs(**self.object_b.model_dump())

        return SimulationInput(
            price=self.price,
            down_percent=self.down_percent,
            rate_percent=self.rate_percent,
            term_years=self.term_years,
            rental_yield_percent=self.rental_yield_percent,
            deposit_rate=deposit_rate,
            appreciation_percent=appreciation_percent,
            rent_inflation_rate=(
                self.rent_inflation_rate
                if self.rent_inflation_rate is not None
                else settings.DEFAULT_RENT_INFLATION_RATE
            ),
            risk_scenario=self.risk_scenario,
            compare_preset=compare_preset,
            object_b=object_b,
            zero_point_sync=self.zero_point_sync,
            initial_total_capital_override=self.initial_total_capital,
            deposit_withdrawals=self.deposit_withdrawals,
            locale=self.locale or settings.DEFAULT_LOCALE,
        )


class PresetSummary(BaseModel):
    key: str
    price: float
    down_percent: float
    rate_percent: float
    term_years: int
    bank_rate: float
    tax_rate: float
    price_growth: float

    @classmethod
    def from_preset(cls, preset: ScenarioPreset) -> "PresetSummary":
        return cls(
            key=preset.key.value,
            price=preset.price,
            down_percent=preset.down_percent,
            rate_percent=preset.rate_percent,
            term_years=preset.term_years,
            bank_rate=preset.rates.bank_rate,
            tax_rate=preset.rates.tax_rate,
            price_growth=preset.rates.price_growth,
        )


class PresetListResponse(BaseModel):
    presets: List[PresetSummary]
