"""Worker process for scheduled vacation jobs.

Runs an asyncio loop that, once per interval, posts monthly accruals on the
1st of the month, rolls year-end carryover on Jan 1 and expires carryover
whose expiry date has passed.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import date
from typing import TYPE_CHECKING

from vacation_engine.config import get_settings
from vacation_engine.services.records import get_record_service

if TYPE_CHECKING:
    from vacation_engine.services.records import VacationRecordService

logger = logging.getLogger(__name__)


async def run_daily_jobs(records: VacationRecordService, today: date) -> None:
    """Run every scheduled vacation job due on ``today`` for every company.

    A failing job is logged and the remaining jobs still run.
    """
    from vacation_engine.services.accrual import SYSTEM_ACTOR, run_monthly_accrual
    from vacation_engine.services.carryover import expire_carryover, run_annual_carryover

    for company_id in await records.list_company_ids():
        # Year-end carryover (only fires on Jan 1)
        if today.month == 1 and today.day == 1:
            try:
                summary = await run_annual_carryover(records, company_id, today.year - 1)
                logger.info(
                    "Carryover run for %s: company=%s processed=%d carried=%s errors=%d",
                    today,
                    company_id,
                    summary.employees_processed,
                    summary.total_days_carried_over,
                    len(summary.errors),
                )
            except Exception:
                logger.exception("Carryover run failed for company=%s on %s", company_id, today)

        # Monthly accrual (only fires on the 1st)
        if today.day == 1:
            try:
                accrual = await run_monthly_accrual(records, company_id, today.year, today.month, SYSTEM_ACTOR)
                logger.info(
                    "Accrual run for %s: company=%s processed=%d skipped=%d accrued=%s",
                    today,
                    company_id,
                    accrual.employees_processed,
                    accrual.skipped,
                    accrual.total_days_accrued,
                )
            except Exception:
                logger.exception("Accrual run failed for company=%s on %s", company_id, today)

        try:
            expiry = await expire_carryover(records, company_id, today)
            if expiry.employees_affected > 0:
                logger.info(
                    "Expiry run for %s: company=%s affected=%d expired=%s",
                    today,
                    company_id,
                    expiry.employees_affected,
                    expiry.days_expired,
                )
        except Exception:
            logger.exception("Expiry run failed for company=%s on %s", company_id, today)


async def run_automation_loop() -> None:
    """Main worker loop."""
    settings = get_settings()
    logger.info("Vacation worker started")

    while True:
        today = date.today()
        logger.info("Running vacation jobs for %s", today)
        await run_daily_jobs(get_record_service(), today)
        await asyncio.sleep(settings.automation_interval_seconds)


def main() -> None:
    """Entry point for the worker process."""
    settings = get_settings()
    logging.basicConfig(level=settings.log_level, format="%(asctime)s %(name)s %(levelname)s %(message)s")
    asyncio.run(run_automation_loop())


if __name__ == "__main__":
    main()
