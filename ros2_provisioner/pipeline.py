from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Protocol, Sequence

from .config import ProvisionConfig
from .errors import ProvisionError
from .host import Host

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StepContext:
    config: ProvisionConfig
    host: Host

    @property
    def dry_run(self) -> bool:
        return self.config.dry_run


class Step(Protocol):
    """A single idempotent step.

    ``is_satisfied`` queries the host; when it holds the step is skipped.
    Steps with ``always_run`` have no skip condition.
    """

    step_id: str
    description: str
    always_run: bool

    def is_satisfied(self, ctx: StepContext) -> bool:
        ...

    def run(self, ctx: StepContext) -> None:
        ...


class StepFailed(ProvisionError):
    def __init__(self, step_id: str, error: ProvisionError) -> None:
        super().__init__(f"Step {step_id} failed: {error}")
        self.step_id = step_id
        self.error = error


@dataclass
class PipelineResult:
    ran_steps: List[str] = field(default_factory=list)
    skipped_steps: List[str] = field(default_factory=list)
    failed_step: Optional[str] = None


def run_pipeline(
    *,
    ctx: StepContext,
    steps: Sequence[Step],
    result: Optional[PipelineResult] = None,
) -> PipelineResult:
    """Run steps in order, skipping satisfied ones and stopping at the first failure.

    Raises StepFailed wrapping the step's ProvisionError; ``result`` (when
    passed in) reflects progress up to that point.
    """

    result = result if result is not None else PipelineResult()

    for step in steps:
        try:
            if not step.always_run and step.is_satisfied(ctx):
                logger.info("Skipping step %s (%s already done)", step.step_id, step.description)
                result.skipped_steps.append(step.step_id)
                continue

            logger.info("--- Running step %s: %s ---", step.step_id, step.description)
            step.run(ctx)
            result.ran_steps.append(step.step_id)

            if not step.always_run and not ctx.dry_run and not step.is_satisfied(ctx):
                logger.warning("Step %s finished but its check still does not hold", step.step_id)
        except ProvisionError as e:
            result.failed_step = step.step_id
            raise StepFailed(step.step_id, e) from e

    return result
