"""HTTP entrypoint that triggers list and detail scrape jobs."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Any, Dict, Optional

from flask import Flask, jsonify, request

from consultant_scraper.core.config import LOG_FORMAT, get_settings
from consultant_scraper.core.storage import ResultStore
from consultant_scraper.jobs.scrape_details import run_details_job
from consultant_scraper.jobs.scrape_list import ALPHABET_SHARDS, UNIQUE_LIST_STEM, run_list_job
from consultant_scraper.vendors.directory import DirectoryClient

# ---------- Logging ----------
logging.basicConfig(level=logging.INFO, format=LOG_FORMAT)
logger = logging.getLogger(__name__)

# ---------- App & executor ----------
app = Flask(__name__)
# One job at a time: both phases write into the same results directories.
_executor = ThreadPoolExecutor(max_workers=1)

# ---------- Routes ----------


@app.get("/healthz")
def healthcheck() -> Any:
    settings = get_settings()
    return (
        jsonify(
            {
                "status": "ok",
                "list_results_dir": settings.list_results_dir,
                "details_results_dir": settings.details_results_dir,
            }
        ),
        200,
    )


def _positive_int(payload: Dict[str, Any], name: str) -> Optional[int]:
    raw = payload.get(name)
    if raw is None:
        return None
    if isinstance(raw, bool):
        raise ValueError(f"{name} must be numeric")
    try:
        value = int(raw)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"{name} must be numeric") from exc
    if value <= 0:
        raise ValueError(f"{name} must be positive")
    return value


@app.post("/scrape/list")
def enqueue_list() -> Any:
    """
    Queue a list scrape.
    Optional JSON fields: max_pages (int), sharded (bool)
    """
    payload: Dict[str, Any] = request.get_json(silent=True) or {}
    try:
        max_pages = _positive_int(payload, "max_pages")
    except ValueError as exc:
        return jsonify({"error": str(exc)}), 400

    job_args = dict(max_pages=max_pages, sharded=bool(payload.get("sharded", False)))
    logger.info("Queueing list scrape job: %s", job_args)
    _executor.submit(_run_job_safe, _run_list, job_args)
    return jsonify({"data": {"status": "queued", "job": "list"}}), 202


@app.post("/scrape/details")
def enqueue_details() -> Any:
    """
    Queue a detail scrape over the persisted unique list.
    Optional JSON fields: concurrency (int)
    """
    payload: Dict[str, Any] = request.get_json(silent=True) or {}
    try:
        concurrency = _positive_int(payload, "concurrency")
    except ValueError as exc:
        return jsonify({"error": str(exc)}), 400

    settings = get_settings()
    input_path = Path(settings.list_results_dir) / f"{UNIQUE_LIST_STEM}.json"
    if not input_path.exists():
        return jsonify({"error": f"run the list scrape first; {input_path} is missing"}), 409

    job_args = dict(concurrency=concurrency or settings.detail_concurrency)
    logger.info("Queueing details scrape job: %s", job_args)
    _executor.submit(_run_job_safe, _run_details, job_args)
    return jsonify({"data": {"status": "queued", "job": "details"}}), 202


# ---------- Internals ----------


def _store() -> ResultStore:
    settings = get_settings()
    return ResultStore(settings.list_results_dir, settings.details_results_dir)


def _run_list(max_pages: Optional[int], sharded: bool) -> None:
    with DirectoryClient() as client:
        run_list_job(client, _store(), shard_keys=ALPHABET_SHARDS if sharded else (), max_pages=max_pages)


def _run_details(concurrency: int) -> None:
    store = _store()
    profiles = store.load_profiles(store.list_dir / f"{UNIQUE_LIST_STEM}.json")
    with DirectoryClient() as client:
        run_details_job(profiles, client, store, concurrency=concurrency)


def _run_job_safe(job, job_args: Dict[str, Any]) -> None:
    try:
        job(**job_args)
    except Exception as exc:  # noqa: BLE001
        logger.exception("Scrape job failed: %s", exc)


def main() -> None:
    port = get_settings().worker_port
    logger.info("[BOOT] Binding on 0.0.0.0:%d", port)
    app.run(host="0.0.0.0", port=port)


if __name__ == "__main__":
    main()
