"""Public package interface for padchain."""

from .cli import main
from .cost import CostEvaluator
from .expander import ChainConfig, score_codes, total_length

__all__ = ["main", "CostEvaluator", "ChainConfig", "score_codes", "total_length"]
