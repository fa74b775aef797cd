"""
Simulation Configuration

Centralizes all tunable parameters for the Death Inc. simulation.
Starting population, rates and cost growth live here instead of being
scattered through the engine as magic numbers.
"""

from dataclasses import dataclass, field


@dataclass
class TimeConfig:
    """Time-related constants."""
    days_per_year: float = 365.25
    days_per_tick: float = 31.0  # One tick = one month
    tick_unit: str = "month"


@dataclass
class PopulationConfig:
    """Starting world state and base demographic rates."""

    # Starting state
    initial_alive: int = 120_000
    initial_due: int = 0
    initial_souls: int = 0

    # Rates are expressed per 1000 people per year.
    # 2019 stats were birth 18.5 / death 7.8; these are a better starting point.
    birth_rate: float = 100.0
    death_rate: float = 10.0
    per_mille: float = 1000.0

    # Fraction of deaths bound for Heaven
    goodness: float = 0.75


@dataclass
class EconomyConfig:
    """Cost growth and harvest parameters."""
    cost_growth_factor: float = 1.12  # Each owned unit makes the next 12% pricier
    click_baseline: int = 1  # Souls harvested per click with no items
    cheat_harvest: int = 1_000_000_000


@dataclass
class LedgerConfig:
    """Heaven/Hell ledger behaviour."""
    split_deaths_by_goodness: bool = False  # Accrue per-tick deaths to customer "owed"


@dataclass
class DebugConfig:
    """Debug settings."""
    log_commands: bool = True  # Log every processed command at DEBUG level


@dataclass
class SimulationConfig:
    """Master configuration for the entire simulation."""

    time: TimeConfig = field(default_factory=TimeConfig)
    population: PopulationConfig = field(default_factory=PopulationConfig)
    economy: EconomyConfig = field(default_factory=EconomyConfig)
    ledger: LedgerConfig = field(default_factory=LedgerConfig)
    debug: DebugConfig = field(default_factory=DebugConfig)

    def __post_init__(self):
        """Validation and derived values."""
        if self.time.days_per_year <= 0:
            raise ValueError("days_per_year must be positive")
        if self.time.days_per_tick <= 0:
            raise ValueError("days_per_tick must be positive")

        if self.population.initial_alive < 0:
            raise ValueError("initial_alive cannot be negative")
        if self.population.initial_due < 0:
            raise ValueError("initial_due cannot be negative")
        if self.population.initial_souls < 0:
            raise ValueError("initial_souls cannot be negative")
        if self.population.birth_rate < 0:
            raise ValueError("birth_rate must be non-negative")
        if self.population.death_rate < 0:
            raise ValueError("death_rate must be non-negative")
        if self.population.per_mille <= 0:
            raise ValueError("per_mille must be positive")
        if not (0.0 <= self.population.goodness <= 1.0):
            raise ValueError("goodness must be in [0, 1]")

        if self.economy.cost_growth_factor <= 1.0:
            raise ValueError("cost_growth_factor must be greater than 1")
        if self.economy.click_baseline < 0:
            raise ValueError("click_baseline cannot be negative")
        if self.economy.cheat_harvest < 0:
            raise ValueError("cheat_harvest cannot be negative")


# Global configuration instance
CONFIG = SimulationConfig()
