"""Risk analyzers, composite scoring and the orchestrator that joins them."""

from .company import CompanyVerifier, evaluate_company
from .orchestrator import RiskOrchestrator
from .patterns import PatternAnalyzer
from .salary import SalaryAnalyzer, infer_tier
from .scoring import build_flags, compute_composite_risk, resolve_confidence

__all__ = [
    "PatternAnalyzer",
    "CompanyVerifier",
    "evaluate_company",
    "SalaryAnalyzer",
    "infer_tier",
    "compute_composite_risk",
    "resolve_confidence",
    "build_flags",
    "RiskOrchestrator",
]
