"""
Relation evaluators, grouped by execution tier.
"""

from ocdg.relations.evaluators import (
    INSTANCE_EVALUATORS,
    PRIMITIVE_EVALUATORS,
    WHOLE_EVALUATORS,
    evaluator_for,
)

__all__ = [
    "PRIMITIVE_EVALUATORS",
    "INSTANCE_EVALUATORS",
    "WHOLE_EVALUATORS",
    "evaluator_for",
]
