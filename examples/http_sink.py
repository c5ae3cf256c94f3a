"""
Example: batch log records into a local collector.

Usage:
    pip install -e .
    GOOD_HTTP_ENDPOINT=http://localhost:31337/events python examples/http_sink.py
"""
import asyncio
import logging
import time

from goodhttp.core import create_http_sink

logging.basicConfig(level=logging.DEBUG)


async def main() -> None:
    sink = create_http_sink(
        threshold=5,
        group_events=True,
        error_threshold=3,
        config={"transport": {"timeout": 5000, "headers": {"x-api-key": "12345"}}},
    )

    for i in range(12):
        event = "log" if i % 3 else "request"
        error = await sink.accept(
            {"id": i, "event": event, "timestamp": int(time.time() * 1000), "value": f"item {i}"}
        )
        if error is not None:
            print(f"collector rejected batch: {error}")

    # Sends the last two records.
    await sink.close()


asyncio.run(main())
