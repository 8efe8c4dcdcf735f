from typing import List

from .sim import Scenario
from ..config import VariableDistributions
from ..random_source import RandomSource

# Draw order is part of the reproducibility contract: changing it changes every
# seeded run.
SCENARIO_VARIABLES = (
    ('monthly_rent', 'rental_income'),
    ('vacancy_rate', 'vacancy_rate'),
    ('annual_expenses', 'operating_expenses'),
    ('appreciation_rate', 'appreciation_rate'),
    ('exit_cap_rate', 'exit_cap_rate'),
)


class ScenarioGenerator:
    def __init__(self, distributions: VariableDistributions):
        self.distributions = distributions

    def generate(self, rng: RandomSource) -> Scenario:
        values = {}
        for field_name, variable in SCENARIO_VARIABLES:
            dist = getattr(self.distributions, variable)
            values[field_name] = dist.sample(rng) if dist is not None else self.distributions.constant(variable)
        return Scenario(**values)

    def generate_many(self, num: int, rng: RandomSource) -> List[Scenario]:
        return [self.generate(rng) for _ in range(num)]
