from __future__ import annotations

from enum import Enum
from typing import Dict

from pydantic import BaseModel, ConfigDict


class PresetKey(str, Enum):
    INVESTOR = "investor"
    FAMILY = "family"
    ENTRY = "entry"


# names used by the admin rate profiles
PRESET_ALIASES: Dict[str, PresetKey] = {
    "investment": PresetKey.INVESTOR,
    "start": PresetKey.ENTRY,
}


class RatesProfile(BaseModel):
    """Bank rate, tax rate and price growth of one preset, all in percent."""

    model_config = ConfigDict(frozen=True)

    bank_rate: float = 18.0
    tax_rate: float = 13.0
    price_growth: float = 5.0

    @property
    def deposit_rate(self) -> float:
        return self.bank_rate / 100


class LoanTerms(BaseModel):
    """Price, down payment and mortgage terms of one object."""

    model_config = ConfigDict(frozen=True)

    price: float
    down_percent: float
    rate_percent: float
    term_years: int

    @property
    def down_payment(self) -> float:
        return self.price * self.down_percent / 100

    @property
    def principal(self) -> float:
        return self.price * (1 - self.down_percent / 100)


class ScenarioPreset(LoanTerms):
    key: PresetKey
    rates: RatesProfile = RatesProfile()


SCENARIO_PRESETS: Dict[PresetKey, ScenarioPreset] = {
    PresetKey.INVESTOR: ScenarioPreset(
        key=PresetKey.INVESTOR, price=15_000_000, down_percent=50, rate_percent=18, term_years=10
    ),
    PresetKey.FAMILY: ScenarioPreset(
        key=PresetKey.FAMILY, price=12_000_000, down_percent=15, rate_percent=6, term_years=30
    ),
    PresetKey.ENTRY: ScenarioPreset(
        key=PresetKey.ENTRY, price=8_000_000, down_percent=10, rate_percent=18, term_years=25
    ),
}


def resolve_preset_key(name: str) -> PresetKey:
    """Map a preset name (or an admin alias such as ``start``) to its key; KeyError if unknown."""
    normalized = name.strip().lower()
    if normalized in PRESET_ALIASES:
        return PRESET_ALIASES[normalized]
    try:
        return PresetKey(normalized)
    except ValueError:
        raise KeyError(name) from None


def get_preset(name: str) -> ScenarioPreset:
    return SCENARIO_PRESETS[resolve_preset_key(name)]
