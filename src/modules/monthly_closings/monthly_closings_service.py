# src/modules/monthly_closings/monthly_closings_service.py
"""Monthly closings service: financial summary and persisted month snapshots."""

import calendar
import logging
from datetime import date
from typing import Optional, Tuple

from sqlalchemy import select, desc
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.common.database.gateway import TableGateway
from src.common.schemas import PaginatedResponse
from src.common.utils.exceptions import ConflictError, NotFoundError, StorageError
from src.common.utils.global_functions import require_date_range, round_money
from src.common.utils.global_messages import GlobalMessages
from src.models.models import Month, MonthlyClosing
from src.modules.bills.bills_service import get_expense_stats
from src.modules.procedures.procedures_service import CLINIC_SHARE, DOCTOR_SHARE, get_income_stats

from .schemas import FinancialSummaryResponse, MonthlyClosingCreateRequest, MonthlyClosingResponse

log = logging.getLogger(__name__)


def month_period(month: Month, year: int) -> Tuple[date, date]:
    """First and last day of a calendar month."""
    last_day = calendar.monthrange(year, month.number)[1]
    return date(year, month.number, 1), date(year, month.number, last_day)


async def get_financial_summary(
    session: AsyncSession,
    start_date: Optional[date],
    end_date: Optional[date]
) -> FinancialSummaryResponse:
    """Combine income and expense statistics of ``[start_date, end_date]``.

    Net profit is what the clinic keeps: general income plus its 40% of
    orthodontics, minus every expense of the period.
    """
    start_date, end_date = require_date_range(start_date, end_date)

    income = await get_income_stats(session, start_date, end_date)
    expenses = await get_expense_stats(session, start_date, end_date)

    return FinancialSummaryResponse(
        total_general_income=income.general_income,
        total_clinical_orthodontic_income=round_money(income.orthodontics_income * CLINIC_SHARE),
        total_orthodontic_doctor_income=round_money(income.orthodontics_income * DOCTOR_SHARE),
        total_fixed_expenses=expenses.fixed_expenses,
        total_variable_expenses=expenses.variable_expenses,
        net_profit=round_money(income.clinic_income - expenses.total_expenses),
    )


async def list_closings(
    session: AsyncSession,
    page: int = 1,
    limit: int = 12
) -> PaginatedResponse[MonthlyClosingResponse]:
    query = select(MonthlyClosing).order_by(desc(MonthlyClosing.year), desc(MonthlyClosing.id))
    result = await TableGateway(session, MonthlyClosing).paginate(query, [], page, limit)

    return PaginatedResponse[MonthlyClosingResponse].from_page(
        result, [MonthlyClosingResponse.model_validate(closing) for closing in result.items]
    )


async def get_closing(session: AsyncSession, closing_id: int) -> MonthlyClosingResponse:
    closing = await TableGateway(session, MonthlyClosing).get(closing_id)
    if not closing:
        raise NotFoundError(GlobalMessages.CLOSING_NOT_FOUND)
    return MonthlyClosingResponse.model_validate(closing)


async def create_closing(session: AsyncSession, request: MonthlyClosingCreateRequest) -> MonthlyClosingResponse:
    """Snapshot the figures of one month. At most one closing per month and year."""
    gateway = TableGateway(session, MonthlyClosing)

    if await gateway.exists(MonthlyClosing.month == request.month, MonthlyClosing.year == request.year):
        raise ConflictError(GlobalMessages.CLOSING_ALREADY_EXISTS)

    default_start, default_end = month_period(request.month, request.year)
    summary = await get_financial_summary(
        session,
        request.start_date or default_start,
        request.end_date or default_end,
    )

    try:
        closing = await gateway.insert({
            **summary.model_dump(),
            "month": request.month,
            "year": request.year,
            "comment": request.comment,
        })
        await gateway.commit()
    except StorageError as e:
        # Another request closed the same month in between
        if not isinstance(e.__cause__, IntegrityError):
            raise
        await session.rollback()
        raise ConflictError(GlobalMessages.CLOSING_ALREADY_EXISTS) from e

    log.info(
        "Monthly closing %s created for %s %s (net profit %.2f)",
        closing.id, request.month.value, request.year, summary.net_profit,
    )
    return MonthlyClosingResponse.model_validate(closing)
