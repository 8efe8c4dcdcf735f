from .errors import ConfigurationError, SimulationCancelled
from .random_source import RandomSource
from .utils import Distribution, NormalDistribution, UniformDistribution, TriangularDistribution, create_distribution
from .config import InvestmentParameters, VariableDistributions, SimulationSettings, TargetMetrics, MonteCarloConfig
from .finance import irr, npv, IRRAnalysisInput, analyze_irr
from .simulation import Scenario, TrialResult, evaluate, ScenarioGenerator, SimulationRunner, SimulationAnalyzer
from .results import MonteCarloReport
from .monte_carlo import MonteCarloSimulator

__all__ = ['ConfigurationError', 'SimulationCancelled', 'RandomSource', 'Distribution', 'NormalDistribution',
           'UniformDistribution', 'TriangularDistribution', 'create_distribution', 'InvestmentParameters',
           'VariableDistributions', 'SimulationSettings', 'TargetMetrics', 'MonteCarloConfig', 'irr', 'npv',
           'IRRAnalysisInput', 'analyze_irr', 'Scenario', 'TrialResult', 'evaluate', 'ScenarioGenerator',
           'SimulationRunner', 'SimulationAnalyzer', 'MonteCarloReport', 'MonteCarloSimulator']
