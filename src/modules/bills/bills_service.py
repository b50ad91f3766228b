# src/modules/bills/bills_service.py
"""Bills service: expense CRUD and expense statistics."""

from datetime import date
from typing import List, Optional

from sqlalchemy import select, func, asc, desc
from sqlalchemy.ext.asyncio import AsyncSession

from src.common.database.gateway import TableGateway
from src.common.schemas import PaginatedResponse
from src.common.utils.exceptions import NotFoundError
from src.common.utils.global_functions import require_date_range, round_money
from src.common.utils.global_messages import GlobalMessages
from src.models.models import Bill, BillCategory

from .schemas import BillCreateRequest, BillResponse, BillType, BillUpdateRequest, ExpenseStatsResponse


async def list_bills(
    session: AsyncSession,
    page: int = 1,
    limit: int = 20,
    category: Optional[BillCategory] = None,
    bill_type: Optional[BillType] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None
) -> PaginatedResponse[BillResponse]:
    """List bills, most recent first."""
    conditions = []
    if category is not None:
        conditions.append(Bill.category == category)
    if bill_type is not None:
        conditions.append(Bill.is_recurrent == (bill_type == BillType.FIJO))
    if start_date:
        conditions.append(Bill.bill_date >= start_date)
    if end_date:
        conditions.append(Bill.bill_date <= end_date)

    query = select(Bill).order_by(desc(Bill.bill_date), desc(Bill.id))
    result = await TableGateway(session, Bill).paginate(query, conditions, page, limit)

    return PaginatedResponse[BillResponse].from_page(
        result, [BillResponse.model_validate(bill) for bill in result.items]
    )


async def get_recurrent_bills(session: AsyncSession) -> List[BillResponse]:
    """Fixed monthly expenses, alphabetical."""
    bills = await TableGateway(session, Bill).fetch_all(
        select(Bill).where(Bill.is_recurrent.is_(True)).order_by(asc(Bill.description), asc(Bill.id))
    )
    return [BillResponse.model_validate(bill) for bill in bills]


async def get_bill_row(session: AsyncSession, bill_id: int) -> Bill:
    bill = await TableGateway(session, Bill).get(bill_id)
    if not bill:
        raise NotFoundError(GlobalMessages.BILL_NOT_FOUND)
    return bill


async def get_bill(session: AsyncSession, bill_id: int) -> BillResponse:
    return BillResponse.model_validate(await get_bill_row(session, bill_id))


async def create_bill(session: AsyncSession, request: BillCreateRequest) -> BillResponse:
    gateway = TableGateway(session, Bill)
    bill = await gateway.insert(request.model_dump())
    await gateway.commit()
    return BillResponse.model_validate(bill)


async def update_bill(session: AsyncSession, bill_id: int, request: BillUpdateRequest) -> BillResponse:
    bill = await get_bill_row(session, bill_id)

    gateway = TableGateway(session, Bill)
    await gateway.update(bill, request.model_dump(exclude_unset=True))
    await gateway.commit()
    return BillResponse.model_validate(bill)


async def delete_bill(session: AsyncSession, bill_id: int) -> BillResponse:
    bill = await get_bill_row(session, bill_id)
    deleted = BillResponse.model_validate(bill)

    gateway = TableGateway(session, Bill)
    await gateway.delete(bill)
    await gateway.commit()
    return deleted


async def get_expense_stats(
    session: AsyncSession,
    start_date: Optional[date],
    end_date: Optional[date]
) -> ExpenseStatsResponse:
    """Aggregate bills for ``[start_date, end_date]`` inclusive, split into fixed and variable."""
    start_date, end_date = require_date_range(start_date, end_date)

    query = (
        select(Bill.is_recurrent, func.coalesce(func.sum(Bill.amount), 0), func.count())
        .where(Bill.bill_date >= start_date, Bill.bill_date <= end_date)
        .group_by(Bill.is_recurrent)
    )
    rows = await TableGateway(session, Bill).fetch_all(query)

    totals = {True: (0.0, 0), False: (0.0, 0)}
    for is_recurrent, amount, count in rows:
        totals[bool(is_recurrent)] = (float(amount or 0), count)

    fixed, fixed_count = totals[True]
    variable, variable_count = totals[False]

    return ExpenseStatsResponse(
        total_expenses=round_money(fixed + variable),
        fixed_expenses=round_money(fixed),
        variable_expenses=round_money(variable),
        total_bills=fixed_count + variable_count,
        fixed_count=fixed_count,
        variable_count=variable_count,
    )
