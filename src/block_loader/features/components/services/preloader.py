"""Best-effort bulk loading of components."""

import asyncio
import logging
from typing import TYPE_CHECKING, Iterable

from ..entities.models import PreloadReport
from ....core.exceptions import ComponentLoadError

if TYPE_CHECKING:
    from .component_loader import ComponentLoader

logger = logging.getLogger(__name__)


class ComponentPreloader:
    """Issues concurrent loads for a batch; one failure never aborts the rest."""

    def __init__(self, loader: "ComponentLoader"):
        self._loader = loader

    async def preload(self, identifiers: Iterable[str]) -> None:
        await self.preload_with_report(identifiers)

    async def preload_with_report(self, identifiers: Iterable[str]) -> PreloadReport:
        identifiers = list(identifiers)
        report = PreloadReport()
        if not identifiers:
            return report

        results = await asyncio.gather(
            *(self._loader.load(identifier) for identifier in identifiers),
            return_exceptions=True,
        )

        for identifier, result in zip(identifiers, results):
            if isinstance(result, BaseException):
                error = (
                    result
                    if isinstance(result, ComponentLoadError)
                    else ComponentLoadError.from_exception(result, identifier)
                )
                logger.warning(f"Failed to preload {identifier}: {error.message}")
                report.failed.append(identifier)
                report.errors[identifier] = error
            else:
                report.loaded.append(identifier)

        logger.debug(f"Preloaded {len(report.loaded)}/{len(identifiers)} components")
        return report
