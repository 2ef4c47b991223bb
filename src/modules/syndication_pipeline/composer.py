import logging
from collections.abc import Awaitable, Callable

from src.modules.syndication_pipeline.schemas import PipelineRun

logger = logging.getLogger(__name__)

PipelineStep = Callable[[PipelineRun], Awaitable[None]]


class PipelineComposer:
    """Manages an ordered sequence of async pipeline steps.

    Steps share one ``PipelineRun``; a step that sets ``halted`` ends the run
    and the remaining steps are skipped.
    """

    def __init__(self) -> None:
        self._steps: list[tuple[str, PipelineStep]] = []

    def add_step(self, name: str, step: PipelineStep) -> None:
        self._steps.append((name, step))

    @property
    def step_names(self) -> list[str]:
        return [name for name, _ in self._steps]

    async def run(self, run: PipelineRun) -> PipelineRun:
        logger.info("Pipeline started (%d steps)", len(self._steps))
        for name, step in self._steps:
            logger.info("Running step: %s", name)
            await step(run)
            if run.halted:
                logger.info("Pipeline halted after step: %s", name)
                return run
            logger.info("Completed step: %s", name)
        logger.info("Pipeline finished")
        return run
