from __future__ import annotations

import time
from pathlib import Path
from typing import Any

import numpy as np

from tbwriter.config import Paths
from tbwriter.logging import RunLogger
from tbwriter.summary import SummaryBuilder
from tbwriter.writer import EventWriter


def write_demo_run(
    paths: Paths,
    *,
    run: str,
    steps: int,
    bins: int,
    samples: int = 10_000,
    seed: int = 0,
) -> dict[str, Any]:
    """
    Write a synthetic training run: a decaying `loss` scalar plus two weight histograms per step.

    Wall times are spaced one second apart starting now so the run spans `steps` seconds.
    """

    if steps <= 0:
        raise ValueError("--steps must be > 0")
    if bins <= 0:
        raise ValueError("--bins must be > 0")

    run_dir = paths.run_dir(run)
    logger = RunLogger.for_run(paths, run)
    rng = np.random.default_rng(seed)
    start = time.time()

    with EventWriter.create(run_dir) as writer:
        event_path: Path | None = writer.path
        logger.log_event("demo_start", {"event_file": str(event_path), "steps": steps, "bins": bins, "seed": seed})
        writer.write_file_version()
        for step in range(steps):
            loss = 10.0 / (step + 1)
            layer1 = rng.normal(loc=float(step), scale=10.0 / np.sqrt(step + 1.0), size=samples)
            final = rng.normal(loc=3.0, scale=10.0, size=samples)
            summ = (
                SummaryBuilder()
                .scalar("loss", loss)
                .histogram("weights/layer1", bins, layer1)
                .histogram("weights/final", bins, final)
                .build()
            )
            writer.write_summary(start + step, step, summ)
            logger.log_summary(step, summ)
            # Flush each step so a live TensorBoard picks it up.
            writer.flush()

    payload = {"run": run, "run_dir": str(run_dir), "event_file": str(event_path), "steps": steps}
    logger.log_event("demo_done", payload)
    return payload
