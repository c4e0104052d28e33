import asyncio
import logging
from typing import Union

from swasthya.application.ports import TextGenerationPort
from swasthya.application.schemas import GenerationOptions
from swasthya.domain.models import AssessmentResult, timeout_result, unavailable_result


logger = logging.getLogger(__name__)


PROVIDER_DEADLINE_SECONDS = 15.0

# Abandoned provider tasks, held until they finish
_late_tasks: "set[asyncio.Task[str]]" = set()


def _drop_late_result(task: "asyncio.Task[str]") -> None:
    _late_tasks.discard(task)
    if task.cancelled():
        return
    error = task.exception()
    if error is not None:
        logger.warning("Provider failed after the deadline: %s", error)
    else:
        logger.info("Discarding provider reply that arrived after the deadline.")


class BoundedInvoker:
    """Races one provider call against a fixed deadline.

    Returns the raw provider text, or a ready-made AssessmentResult when the
    provider timed out or failed. The provider task is never cancelled; once
    the deadline passes its outcome is logged and dropped.
    """

    def __init__(
        self,
        provider: TextGenerationPort,
        options: GenerationOptions,
        deadline: float = PROVIDER_DEADLINE_SECONDS,
    ):
        self.provider = provider
        self.options = options
        self.deadline = deadline

    async def invoke(self, prompt: str) -> Union[str, AssessmentResult]:
        task = asyncio.ensure_future(self.provider.complete(prompt, self.options))
        done, _ = await asyncio.wait({task}, timeout=self.deadline)

        if task not in done:
            logger.warning("Provider did not respond within %.1fs.", self.deadline)
            _late_tasks.add(task)
            task.add_done_callback(_drop_late_result)
            return timeout_result()

        try:
            return task.result()
        except Exception as e:
            logger.exception("Provider call failed: %s", e)
            return unavailable_result()
