"""
Command line tools for operating the service.

The repair command is meant to run periodically (cron, Kubernetes CronJob)
next to the API so that references left behind by interrupted review writes
are always cleaned up.
"""

# Load environment variables before the settings object is created
from dotenv import load_dotenv
load_dotenv()

import asyncio
import json

import typer

from app.core.config import config
from app.db.mongodb import (
    close_mongo_connection,
    get_author_collection,
    get_listing_collection,
    get_review_collection,
)
from app.repositories.author import AuthorRepository
from app.repositories.listing import ListingRepository
from app.repositories.review import ReviewRepository
from app.schemas.repair import RepairReport
from app.services.repair import ConsistencyRepairService
from app.services.review import ReviewService

app = typer.Typer(
    name="yarn-review",
    help="Yarn Review Service operational commands",
    no_args_is_help=True,
)


async def run_repair(dry_run: bool) -> RepairReport:
    try:
        reviews = ReviewRepository(await get_review_collection())
        listings = ListingRepository(await get_listing_collection())
        authors = AuthorRepository(await get_author_collection())
        service = ConsistencyRepairService(
            reviews, listings, authors, ReviewService(reviews, listings, authors)
        )
        return await service.run(dry_run=dry_run)
    finally:
        await close_mongo_connection()


@app.command()
def repair(
    dry_run: bool = typer.Option(False, "--dry-run", help="Report problems without fixing them"),
    fail_on_findings: bool = typer.Option(
        False, "--fail-on-findings", help="Exit with status 1 when anything needed repair"
    ),
):
    """Repair orphan reviews, dangling review references and drifted averages."""
    report = asyncio.run(run_repair(dry_run))
    typer.echo(json.dumps(report.model_dump(mode="json"), indent=2))
    if fail_on_findings and not report.clean:
        raise typer.Exit(code=1)


@app.command()
def version():
    """Show the service version."""
    typer.echo(f"{config.service_name} {config.service_version}")


if __name__ == "__main__":
    app()
