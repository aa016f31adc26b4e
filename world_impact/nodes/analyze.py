# world_impact/nodes/analyze.py

"""
Node that scores and characterizes the figure from the summary (stage 2).
"""
from typing import Any, Dict

from world_impact.errors import AnalysisGenerationError
from world_impact.graph.state import AnalysisState
from world_impact.nodes.base import BaseNode
from world_impact.utils.logger import get_logger

logger = get_logger("AnalysisNode")


class AnalysisNode(BaseNode):
    """Runs the analysis generator once on the stage-1 summary."""

    step_name = "analyze"

    def run(self, state: AnalysisState) -> Dict[str, Any]:
        person_name = state["request"].person_name
        summary_json = state["summary"].model_dump_json(indent=2)

        logger.info(f"Analyzing historical impact of {person_name}...")

        try:
            analysis = self._generate_with_timing(person_name, summary=summary_json)
        except Exception as e:
            logger.error(f"Analysis failed for {person_name}: {e}", exc_info=True)
            return {
                "error": AnalysisGenerationError(
                    f"Could not analyze historical figure: {e}", stage=self.step_name, cause=e
                )
            }

        logger.info(f"Analysis resolved {person_name!r} to {analysis.name!r}")
        return {
            "analysis": analysis,
            "steps_completed": state["steps_completed"] + [self.step_name],
        }
