from app.services.blocking_check import BlockingCheckEvaluator, BlockingReport
from app.services.cascade_deletion import CascadeDeletionService
from app.services.cascade_executor import CascadeExecutor, DeletionSummary
from app.services.dag_builder import DAGBuilder
from app.services.dependency_graph import DependencyGraph, get_dependency_graph
from app.services.dependency_resolver import CascadePlan, DependencyResolver

__all__ = [
	"DAGBuilder",
	"BlockingCheckEvaluator",
	"BlockingReport",
	"CascadeDeletionService",
	"CascadeExecutor",
	"CascadePlan",
	"DeletionSummary",
	"DependencyGraph",
	"DependencyResolver",
	"get_dependency_graph",
]
