"""Pipeline modules for orchestrating routing workflows."""

from .evaluation_pipeline import RoutingEvaluationPipeline
from .route_pipeline import RoutingPipeline
from .store_init_pipeline import StoreInitPipeline, discard_store_file

__all__ = [
    "RoutingEvaluationPipeline",
    "RoutingPipeline",
    "StoreInitPipeline",
    "discard_store_file",
]
