from .sim import Scenario, TrialResult, evaluate
from .sim_builder import ScenarioGenerator
from .sim_runner import SimulationRunner
from .sim_analyzer import SimulationAnalyzer

__all__ = ['Scenario', 'TrialResult', 'evaluate', 'ScenarioGenerator', 'SimulationRunner', 'SimulationAnalyzer']
