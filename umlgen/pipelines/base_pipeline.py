"""
Base pipeline module for code generation.

This module defines the abstract Pipeline class that generation
pipelines build on, and the PipelineResult every run returns.
"""

import time
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Optional

logger = logging.getLogger(__name__)


@dataclass
class PipelineResult:
    """
    Results from a pipeline execution.

    This dataclass captures the outcome, metrics, and messages
    of a pipeline execution for reporting.
    """

    # Whether the pipeline completed successfully
    success: bool = False

    # Reason for failure; None on success
    error_message: Optional[str] = None

    # Time taken to execute the pipeline
    execution_time: float = 0.0

    # Metrics collected during execution
    metrics: dict[str, Any] = field(default_factory=dict)

    # Messages and logs
    messages: list[str] = field(default_factory=list)

    def add_message(self, message: str) -> None:
        """Add a message to the results."""
        self.messages.append(message)

    def add_metric(self, name: str, value: Any) -> None:
        """Add a metric to the results."""
        self.metrics[name] = value


class Pipeline(ABC):
    """
    Abstract base class for generation pipelines.

    This class provides timing, message and metric bookkeeping. A
    pipeline instance may be executed repeatedly; `_start_execution`
    clears the bookkeeping of the previous run.
    """

    result_class = PipelineResult

    def __init__(self, name: str):
        """
        Initialize the pipeline.

        Args:
            name: Name of the pipeline
        """
        self.name = name
        self.messages: list[str] = []
        self.metrics: dict[str, Any] = {}
        self.start_time: Optional[float] = None
        self.end_time: Optional[float] = None

    @abstractmethod
    def setup(self, **kwargs) -> bool:
        """
        Set up the pipeline with the given parameters.

        Args:
            **kwargs: Pipeline-specific parameters

        Returns:
            True if setup successful, False otherwise
        """

    @abstractmethod
    def execute(self, **kwargs) -> PipelineResult:
        """
        Execute the pipeline.

        Args:
            **kwargs: Pipeline-specific parameters

        Returns:
            Result of the pipeline execution
        """

    def _start_execution(self) -> None:
        """Reset bookkeeping and record the start time of execution."""
        self.messages = []
        self.metrics = {}
        self.end_time = None
        self.start_time = time.perf_counter()
        logger.info("Starting %s pipeline", self.name)

    def _end_execution(self) -> float:
        """
        Record the end time of execution.

        Returns:
            Execution time in seconds
        """
        self.end_time = time.perf_counter()
        execution_time = self.end_time - self.start_time
        logger.info("Completed %s pipeline in %.3f seconds", self.name, execution_time)
        return execution_time

    def add_message(self, message: str) -> None:
        """
        Add a message to the pipeline log.

        Args:
            message: Message to add
        """
        self.messages.append(message)
        logger.info(message)

    def add_warning(self, message: str) -> None:
        """
        Add a warning message to the pipeline log.

        Args:
            message: Warning message to add
        """
        self.messages.append(f"WARNING: {message}")
        logger.warning(message)

    def add_error(self, message: str) -> None:
        """
        Add an error message to the pipeline log.

        Args:
            message: Error message to add
        """
        self.messages.append(f"ERROR: {message}")
        logger.error(message)

    def add_metric(self, name: str, value: Any) -> None:
        """
        Add a metric to the pipeline.

        Args:
            name: Metric name
            value: Metric value
        """
        self.metrics[name] = value
        logger.debug("Metric %s: %s", name, value)

    def create_result(self, success: bool, error_message: Optional[str] = None, **outputs: Any) -> PipelineResult:
        """
        Create a pipeline result.

        Args:
            success: Whether the pipeline executed successfully
            error_message: Reason for failure
            **outputs: Extra fields of the pipeline's result class

        Returns:
            Instance of `result_class`
        """
        execution_time = 0.0
        if self.start_time is not None:
            if self.end_time is None:
                self._end_execution()
            execution_time = self.end_time - self.start_time

        return self.result_class(
            success=success,
            error_message=error_message,
            execution_time=execution_time,
            metrics=self.metrics.copy(),
            messages=self.messages.copy(),
            **outputs,
        )
