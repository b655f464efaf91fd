#!/usr/bin/env python
"""CLI for the news curation service."""

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Literal

import uvicorn
from pydantic import BaseModel, field_validator, model_validator

from news_curation.config import (
    CurationConfig,
    create_from_config,
    get_default_config_path,
    load_config,
)
from news_curation.http import create_app
from news_curation.news import clear_cache

logger = logging.getLogger(__name__)


class CLIArgs(BaseModel):
    """Validated CLI arguments."""

    command: Literal["serve", "run", "clear-cache"]
    task: str | None = None
    config: Path
    log: bool = False
    log_dir: str | None = None

    @field_validator("config")
    @classmethod
    def config_must_exist(cls, v: Path) -> Path:
        if not v.exists():
            raise ValueError(f"Config file not found: {v}")
        return v

    @model_validator(mode="after")
    def run_needs_task(self) -> "CLIArgs":
        if self.command == "run" and not self.task:
            raise ValueError("The run command needs a task name")
        return self


def apply_overrides(config: CurationConfig, args: CLIArgs) -> CurationConfig:
    """Apply --log / --log-dir on top of the file config."""
    run_log = config.run_log
    if args.log:
        run_log = run_log.model_copy(update={"enabled": True})
    if args.log_dir is not None:
        run_log = run_log.model_copy(update={"log_dir": args.log_dir})
    return config.model_copy(update={"run_log": run_log})


def serve(config: CurationConfig) -> None:
    """Serve the API, with the scheduler running in the app lifespan."""
    container = create_from_config(config)
    app = create_app(container.get_articles, lifespan=container.lifespan)
    logger.info("Serving on %s:%d (%s)", config.app.host, config.app.port, config.app.env)
    uvicorn.run(app, host=config.app.host, port=config.app.port)


async def run_task(config: CurationConfig, name: str) -> None:
    """Run one task once and exit.

    Args:
        config: Root configuration.
        name: Task name, e.g. "story-digest".
    """
    container = create_from_config(config)
    task = container.scheduler.get(name)
    await container.database.connect()
    try:
        await task.execute()
    finally:
        await container.database.disconnect()


def main() -> None:
    """Entry point for the CLI."""
    parser = argparse.ArgumentParser(description="Curate news into stories and articles.")
    parser.add_argument(
        "command",
        choices=["serve", "run", "clear-cache"],
        help="serve the API with the scheduler, run one task, or clear the news cache",
    )
    parser.add_argument(
        "task",
        nargs="?",
        help="Task name for the run command (story-digest, article-generation)",
    )
    parser.add_argument(
        "--config",
        "-c",
        type=Path,
        default=None,
        help="Path to YAML config file (default: configs/default.yaml)",
    )
    parser.add_argument(
        "--log",
        action="store_true",
        default=False,
        help="Enable per-run JSON task logging",
    )
    parser.add_argument(
        "--log-dir",
        type=str,
        default=None,
        help="Directory for run log files (default: from config)",
    )

    ns = parser.parse_args()
    config_path: Path = ns.config if ns.config else get_default_config_path()

    try:
        args = CLIArgs(
            command=ns.command,
            task=ns.task,
            config=config_path,
            log=ns.log,
            log_dir=ns.log_dir,
        )
        config = apply_overrides(load_config(args.config), args)
    except Exception as e:
        logging.basicConfig(level=logging.INFO, format="%(message)s")
        logger.error(str(e))
        sys.exit(1)

    logging.basicConfig(
        level=config.app.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        if args.command == "serve":
            serve(config)
        elif args.command == "run":
            asyncio.run(run_task(config, args.task or ""))
        else:
            clear_cache(config.news.cache_dir, config.app.env)
    except KeyError as e:
        logger.error(e.args[0])
        sys.exit(2)
    except KeyboardInterrupt:
        sys.exit(130)


if __name__ == "__main__":
    main()
