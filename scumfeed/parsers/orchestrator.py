"""
SCUM Feed - Poll Orchestrator
Schedules one interval job per Source pipeline
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler

from .pipeline import LogPipeline

logger = logging.getLogger(__name__)


class PollOrchestrator:
    """
    POLL ORCHESTRATOR
    - One APScheduler interval job per pipeline, at most one run in flight
    - Pipelines are independent; no ordering across Sources
    - Shutdown stops scheduling, then waits for in-flight ticks
    """

    def __init__(self, scheduler: Optional[AsyncIOScheduler] = None, notifier=None):
        self.scheduler = scheduler or AsyncIOScheduler(timezone=timezone.utc)
        self.notifier = notifier
        self.pipelines: Dict[str, LogPipeline] = {}

    @staticmethod
    def job_id(name: str) -> str:
        return f"log_pipeline_{name}"

    async def add_pipeline(self, pipeline: LogPipeline):
        """Load the pipeline's cursor and schedule its ticks"""
        await pipeline.start()
        self.pipelines[pipeline.name] = pipeline

        try:
            self.scheduler.add_job(
                pipeline.tick,
                'interval',
                seconds=pipeline.source.poll_interval,
                id=self.job_id(pipeline.name),
                replace_existing=True,
                max_instances=1,
                coalesce=True,
                next_run_time=datetime.now(timezone.utc)
            )
            logger.info(f"Log pipeline {pipeline.name} scheduled (every {pipeline.source.poll_interval} seconds)")
        except Exception as e:
            logger.error(f"Failed to schedule log pipeline {pipeline.name}: {e}")

    def start(self):
        if not self.scheduler.running:
            self.scheduler.start()
            logger.info(f"Poll orchestrator started with {len(self.pipelines)} pipelines")

    async def tick_all(self) -> int:
        """Tick every pipeline once, in turn"""
        total = 0
        for pipeline in list(self.pipelines.values()):
            total += await pipeline.tick()
        return total

    async def reset_source(self, name: str) -> bool:
        pipeline = self.pipelines.get(name)
        if pipeline is None:
            logger.warning(f"Cannot reset unknown source {name}")
            return False
        await pipeline.reset()
        return True

    def status(self) -> List[Dict[str, Any]]:
        return [pipeline.status() for pipeline in self.pipelines.values()]

    async def shutdown(self):
        """Stop scheduling, let in-flight ticks finish, close the sink"""
        try:
            if self.scheduler.running:
                self.scheduler.shutdown(wait=False)
        except Exception as e:
            logger.error(f"Error stopping scheduler: {e}")

        for pipeline in list(self.pipelines.values()):
            await pipeline.drain()

        if self.notifier is not None:
            try:
                await self.notifier.close()
            except Exception as e:
                logger.error(f"Error closing notifier: {e}")

        logger.info("Poll orchestrator shutdown complete")
