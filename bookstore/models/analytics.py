"""
Result models for query diagnostics.

Aggregation rows are not modelled here; they are printed exactly as the
server returns them. Explain output is large, so it gets a digest.
"""

from typing import Any

from pydantic import BaseModel, Field


class ExplainSummary(BaseModel):
    """
    Digest of an ``explain`` document.

    Captures the winning plan's stage chain (outermost first) and the
    execution counters, enough to tell an index scan from a collection scan.
    """

    namespace: str | None = None
    stages: list[str] = Field(default_factory=list)
    index_names: list[str] = Field(default_factory=list)
    n_returned: int | None = None
    total_keys_examined: int | None = None
    total_docs_examined: int | None = None
    execution_time_ms: int | None = None

    @property
    def uses_index(self) -> bool:
        return "IXSCAN" in self.stages

    @property
    def is_collection_scan(self) -> bool:
        return "COLLSCAN" in self.stages

    @classmethod
    def from_explain(cls, explain: dict[str, Any]) -> "ExplainSummary":
        """
        Build a summary from a raw explain document.

        Handles both the classic plan layout and the slot-based engine's,
        where the winning plan is wrapped in a ``queryPlan`` key.
        """
        planner = explain.get("queryPlanner", {})
        winning = planner.get("winningPlan", {})
        if "queryPlan" in winning:
            winning = winning["queryPlan"]

        stages: list[str] = []
        index_names: list[str] = []
        _walk_plan(winning, stages, index_names)

        stats = explain.get("executionStats", {})

        return cls(
            namespace=planner.get("namespace"),
            stages=stages,
            index_names=index_names,
            n_returned=stats.get("nReturned"),
            total_keys_examined=stats.get("totalKeysExamined"),
            total_docs_examined=stats.get("totalDocsExamined"),
            execution_time_ms=stats.get("executionTimeMillis"),
        )

    def describe(self) -> str:
        """One-line human readable description."""
        chain = " <- ".join(self.stages) or "unknown"
        index = ", ".join(self.index_names) or "none"
        return (
            f"plan: {chain} | index: {index} | "
            f"returned: {self.n_returned} | keys examined: {self.total_keys_examined} | "
            f"docs examined: {self.total_docs_examined} | time: {self.execution_time_ms}ms"
        )


def _walk_plan(stage: dict[str, Any], stages: list[str], index_names: list[str]) -> None:
    if not stage:
        return

    name = stage.get("stage")
    if name:
        stages.append(name)
    if stage.get("indexName"):
        index_names.append(stage["indexName"])

    if "inputStage" in stage:
        _walk_plan(stage["inputStage"], stages, index_names)
    for child in stage.get("inputStages", []):
        _walk_plan(child, stages, index_names)
