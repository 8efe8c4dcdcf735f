from .discounting import IRRResult, npv, npv_derivative, irr, irr_result
from .loan import monthly_payment, remaining_balance
from .irr_analysis import IRRAnalysisInput, IRRAnalysis, SensitivityScenario, analyze_irr

__all__ = ['IRRResult', 'npv', 'npv_derivative', 'irr', 'irr_result', 'monthly_payment', 'remaining_balance',
           'IRRAnalysisInput', 'IRRAnalysis', 'SensitivityScenario', 'analyze_irr']
