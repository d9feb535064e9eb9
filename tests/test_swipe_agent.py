from __future__ import annotations

import asyncio
import unittest

from swipe_ai.agents.models import CROPlan, LandingAnalysis, ProductAnalysis, SwipeInput, SwipeResult
from swipe_ai.agents.swipe_agent import SwipeAgent
from swipe_ai.errors import ModelAPIError, SnapshotError
from swipe_ai.services.page_snapshotter import PageSnapshot
from swipe_ai.streaming.events import EventType, ProgressChannel
from tests import fixtures

SWIPE_INPUT = SwipeInput(
    url="https://example.com",
    productName="Acme Widget",
    productDescription="A widget that sorts socks.",
)


class Recorder:
    """Shared log of stage starts and finishes"""

    def __init__(self):
        self.log = []


class StubSnapshotter:
    def __init__(self, recorder, error=None):
        self.recorder = recorder
        self.error = error

    async def capture(self, url):
        self.recorder.log.append("capture")
        if self.error:
            raise self.error
        return PageSnapshot(url=url, title="T", html="<!DOCTYPE html><html></html>", screenshot=b"jpg")


class StubStage:
    def __init__(self, recorder, name, result, delay=0.0, error=None):
        self.recorder = recorder
        self.name = name
        self.result = result
        self.delay = delay
        self.error = error
        self.calls = []

    async def run(self, *args):
        self.calls.append(args)
        self.recorder.log.append(f"{self.name}:start")
        await asyncio.sleep(self.delay)
        if self.error:
            raise self.error
        self.recorder.log.append(f"{self.name}:done")
        return self.result


class SwipeAgentTests(unittest.IsolatedAsyncioTestCase):
    def _agent(self, product_delay=0.0, product_error=None, capture_error=None, landing_error=None):
        self.recorder = Recorder()
        self.product = StubStage(
            self.recorder, "product",
            ProductAnalysis.model_validate(fixtures.product_analysis()),
            delay=product_delay, error=product_error,
        )
        self.landing = StubStage(
            self.recorder, "landing",
            LandingAnalysis.model_validate(fixtures.landing_analysis()),
            error=landing_error,
        )
        self.cro = StubStage(self.recorder, "cro", CROPlan.model_validate(fixtures.cro_plan()))
        self.html = StubStage(self.recorder, "html", "<!DOCTYPE html>\n<html><body>new</body></html>")
        return SwipeAgent(
            snapshotter=StubSnapshotter(self.recorder, error=capture_error),
            product_analyzer=self.product,
            landing_analyzer=self.landing,
            cro_architect=self.cro,
            html_builder=self.html,
        )

    async def _run_collecting(self, agent):
        channel = ProgressChannel()
        subscription = channel.subscribe()
        result = await agent.execute(SWIPE_INPUT, progress=channel)
        await channel.result({})
        events = [event async for event in subscription]
        return result, [e for e in events if e.type == EventType.PROGRESS]

    async def test_end_to_end_phase_order(self):
        result, events = await self._run_collecting(self._agent())

        phases = []
        for event in events:
            if event.phase in ("product_analysis", "landing_analysis"):
                continue
            if not phases or phases[-1] != event.phase:
                phases.append(event.phase)
        self.assertEqual(
            phases,
            ["starting", "phase1", "phase1_complete", "phase2", "cro_planning",
             "phase2_complete", "phase3", "html_generation", "complete"],
        )

        branch_phases = {e.phase for e in events if e.progress is not None and 10 <= e.progress <= 25}
        self.assertEqual(branch_phases, {"product_analysis", "landing_analysis"})

        first_branch = next(i for i, e in enumerate(events) if e.phase in ("product_analysis", "landing_analysis"))
        last_branch = max(i for i, e in enumerate(events) if e.phase in ("product_analysis", "landing_analysis"))
        phase1 = next(i for i, e in enumerate(events) if e.phase == "phase1")
        phase1_complete = next(i for i, e in enumerate(events) if e.phase == "phase1_complete")
        self.assertLess(phase1, first_branch)
        self.assertLess(last_branch, phase1_complete)

        self.assertIsInstance(result, SwipeResult)
        self.assertTrue(result.html.startswith("<!DOCTYPE"))
        self.assertEqual(events[-1].progress, 100)

    async def test_progress_is_optional(self):
        result = await self._agent().execute(SWIPE_INPUT)
        self.assertEqual(result.croPlan.copy_tone.language, "it")

    async def test_stages_receive_upstream_outputs(self):
        await self._agent().execute(SWIPE_INPUT)

        snapshot, = self.landing.calls[0]
        self.assertEqual(snapshot.url, "https://example.com")
        product, landing, swipe_input = self.cro.calls[0]
        self.assertIs(product, self.product.result)
        self.assertIs(landing, self.landing.result)
        self.assertIs(swipe_input, SWIPE_INPUT)
        plan, design = self.html.calls[0]
        self.assertIs(plan, self.cro.result)
        self.assertIs(design, self.landing.result.design_system)

    async def test_cro_waits_for_slow_product_branch(self):
        agent = self._agent(product_delay=0.05)
        await agent.execute(SWIPE_INPUT)

        log = self.recorder.log
        self.assertLess(log.index("landing:done"), log.index("product:done"))
        self.assertLess(log.index("product:done"), log.index("cro:start"))

    async def test_product_failure_stops_pipeline(self):
        agent = self._agent(product_error=ModelAPIError("Claude API error 500: boom", status_code=500))

        with self.assertRaises(ModelAPIError):
            await agent.execute(SWIPE_INPUT)

        self.assertEqual(self.cro.calls, [])
        self.assertEqual(self.html.calls, [])

    async def test_capture_failure_stops_pipeline(self):
        agent = self._agent(capture_error=SnapshotError("Failed to load https://example.com"))

        with self.assertRaises(SnapshotError):
            await agent.execute(SWIPE_INPUT)

        self.assertEqual(self.landing.calls, [])
        self.assertEqual(self.cro.calls, [])
        self.assertEqual(self.html.calls, [])

    async def test_landing_failure_stops_pipeline_even_when_product_is_slow(self):
        agent = self._agent(product_delay=0.05, landing_error=ModelAPIError("Gemini API error 429: quota"))

        with self.assertRaises(ModelAPIError):
            await agent.execute(SWIPE_INPUT)
        await asyncio.sleep(0.1)

        self.assertEqual(self.cro.calls, [])
        self.assertEqual(self.html.calls, [])

    async def test_failure_emits_no_completion_events(self):
        agent = self._agent(landing_error=ModelAPIError("Gemini API error 500: x"))
        channel = ProgressChannel()
        subscription = channel.subscribe()

        with self.assertRaises(ModelAPIError):
            await agent.execute(SWIPE_INPUT, progress=channel)
        await channel.error("done")

        phases = [event.phase async for event in subscription]
        self.assertNotIn("phase1_complete", phases)
        self.assertNotIn("complete", phases)


if __name__ == "__main__":
    unittest.main()
