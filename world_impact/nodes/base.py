# world_impact/nodes/base.py

from typing import Any, Dict
from abc import ABC, abstractmethod
import time

from pydantic import BaseModel

from world_impact.graph.state import AnalysisState
from world_impact.llm.structured import StructuredGenerator
from world_impact.utils.logger import get_logger

logger = get_logger("BaseNode")


class BaseNode(ABC):
    """
    Abstract base class for the LLM-driven nodes of the analysis workflow.
    Each node owns one structured generator and calls it exactly once.
    """

    step_name: str = "llm_step"

    def __init__(self, generator: StructuredGenerator):
        self.generator = generator

    @abstractmethod
    def run(self, state: AnalysisState) -> Dict[str, Any]:
        """
        The main execution method for the node. Must be implemented by subclasses.
        """

    def _generate_with_timing(self, person_name: str, **prompt_vars: Any) -> BaseModel:
        """
        Invokes the generator and logs latency.

        Args:
            person_name: Subject of the call, for logging.
            prompt_vars: Variables for the prompt template.

        Returns:
            The validated Pydantic output model.
        """
        start_time = time.time()

        output = self.generator.generate(person_name=person_name, **prompt_vars)

        duration_ms = (time.time() - start_time) * 1000
        logger.info(
            f"{self.step_name} completed for {person_name}",
            step=self.step_name,
            generator=self.generator.name,
            latency_ms=round(duration_ms, 1),
        )
        return output
