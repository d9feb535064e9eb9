#!/usr/bin/env python3
"""
Run one swipe end-to-end against live services.

Captures the given URL, runs all four stages with the keys from .env and
writes the generated page plus the intermediate analyses to ./swipe_output/.

Usage:
    python scripts/run_swipe.py https://example.com "Acme Widget" "A widget that sorts socks"
    python scripts/run_swipe.py https://example.com "Acme Widget" "..." --snapshot-only
"""
import argparse
import asyncio
import json
import sys
from datetime import datetime
from pathlib import Path

# Add parent to path
sys.path.insert(0, str(Path(__file__).parent.parent))

OUTPUT_DIR = Path("swipe_output")


async def print_progress(subscription):
    async for event in subscription:
        payload = event.to_payload()
        if payload["type"] == "progress":
            print(f"  [{payload['progress']:>3}%] {payload['phase']}: {payload['message']}")
        else:
            print(f"  {payload['type'].upper()}")


async def run(url: str, product_name: str, description: str, snapshot_only: bool) -> bool:
    from swipe_ai.config import settings
    from swipe_ai.agents.models import SwipeInput
    from swipe_ai.agents.swipe_agent import SwipeAgent
    from swipe_ai.services.browser import BrowserHandle
    from swipe_ai.services.page_snapshotter import PageSnapshotter, SnapshotOptions
    from swipe_ai.streaming.events import ProgressChannel

    print(f"\n{'='*60}")
    print(f"Swipe: {url} -> {product_name}")
    print(f"{'='*60}")

    run_dir = OUTPUT_DIR / datetime.now().strftime("%Y%m%d_%H%M%S")
    run_dir.mkdir(parents=True, exist_ok=True)

    browser = BrowserHandle(headless=settings.BROWSER_HEADLESS)
    snapshotter = PageSnapshotter(browser, SnapshotOptions.from_settings(settings))

    try:
        if snapshot_only:
            print("\n[Snapshot] Capturing page with Playwright...")
            snapshot = await snapshotter.capture(url)
            (run_dir / "snapshot.html").write_text(snapshot.html, encoding="utf-8")
            (run_dir / "screenshot.jpg").write_bytes(snapshot.screenshot)
            print(f"  Title: {snapshot.title}")
            print(f"  HTML: {len(snapshot.html)} chars, {snapshot.stylesheet_count} stylesheets inlined")
            print(f"  Skipped stylesheets: {snapshot.skipped_stylesheets}")
            print(f"  Screenshot: {len(snapshot.screenshot)} bytes")
            print(f"\nSaved to {run_dir}")
            return True

        agent = SwipeAgent.from_settings(snapshotter, settings)
        channel = ProgressChannel()
        printer = asyncio.create_task(print_progress(channel.subscribe()))

        try:
            result = await agent.execute(
                SwipeInput(url=url, productName=product_name, productDescription=description),
                progress=channel,
            )
        except Exception as e:
            await channel.error(str(e))
            await printer
            print(f"\n  ERROR: {type(e).__name__}: {e}")
            return False

        await channel.result({})
        await printer

        (run_dir / "landing.html").write_text(result.html, encoding="utf-8")
        for name in ("productAnalysis", "landingAnalysis", "croPlan"):
            data = getattr(result, name).model_dump(mode="json")
            (run_dir / f"{name}.json").write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")

        print(f"\n  Source sections: {len(result.landingAnalysis.sections)}")
        print(f"  Planned sections: {len(result.croPlan.sections)}")
        print(f"  HTML: {len(result.html)} chars")
        print(f"\nSaved to {run_dir}")
        return True
    finally:
        await browser.dispose()


def main():
    parser = argparse.ArgumentParser(description="Run one live swipe")
    parser.add_argument("url")
    parser.add_argument("product_name")
    parser.add_argument("description")
    parser.add_argument("--snapshot-only", action="store_true", help="Only capture the page")
    args = parser.parse_args()

    ok = asyncio.run(run(args.url, args.product_name, args.description, args.snapshot_only))
    sys.exit(0 if ok else 1)


if __name__ == "__main__":
    main()
