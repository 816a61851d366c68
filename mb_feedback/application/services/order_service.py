"""Order service: ingestion of completed orders from the broker.

Features:
- One batched lookup of already-known external IDs
- Phone normalisation to +7XXXXXXXXXX, skipping orders with unusable phones
- Single batch insert of every new order
"""

from typing import List

import structlog

from mb_feedback.core.exceptions import (
    FetchError,
    InvalidPhoneNumberError,
    OrdersMissedError,
    PersistenceError,
)
from mb_feedback.domain.gateways import OrderFetcher
from mb_feedback.domain.repositories.order_repository import OrderRepository
from mb_feedback.domain.schemas.order import OrderCreate, OrderListParams

logger = structlog.get_logger(__name__)


def format_phone_number(phone: str) -> str:
    """Normalise a phone number to ``+7XXXXXXXXXX``.

    Accepts exactly two shapes after trimming: ten digits (the country code is
    prepended) or eleven digits starting with 7.
    """
    normalized = (phone or "").strip()

    if normalized.isdigit():
        if len(normalized) == 10:
            return "+7" + normalized
        if len(normalized) == 11 and normalized.startswith("7"):
            return "+" + normalized

    raise InvalidPhoneNumberError(phone)


async def ingest_completed_orders(repo: OrderRepository, fetcher: OrderFetcher) -> int:
    """Fetch completed orders and store the ones not known yet.

    Returns the number of inserted orders. Orders with an invalid phone are
    logged and skipped; if every new order was skipped the run fails with
    OrdersMissedError.
    """
    try:
        fetched_orders = await fetcher.fetch_completed_orders()
    except Exception as e:
        raise FetchError(f"Failed to fetch completed orders: {e}") from e

    if not fetched_orders:
        logger.info("No completed orders fetched")
        return 0

    external_ids = [order.external_order_id for order in fetched_orders]
    existing_orders, _ = repo.list(OrderListParams(external_order_ids=external_ids))
    # The broker may repeat an order across pages; treat repeats as known
    seen = {order.external_order_id for order in existing_orders}

    new_count = 0
    orders_to_insert: List[OrderCreate] = []
    for order in fetched_orders:
        if order.external_order_id in seen:
            continue
        seen.add(order.external_order_id)
        new_count += 1

        try:
            user_phone = format_phone_number(order.user_phone)
        except InvalidPhoneNumberError as e:
            logger.warning(
                "Skipping order with invalid phone number",
                order_id=order.external_order_id,
                phone=order.user_phone,
                error=e.message,
            )
            continue

        orders_to_insert.append(
            OrderCreate(
                external_order_id=order.external_order_id,
                user_phone=user_phone,
                user_name=order.user_name,
            )
        )

    if new_count == 0:
        logger.info("All fetched orders are already known", fetched=len(fetched_orders))
        return 0

    if not orders_to_insert:
        raise OrdersMissedError(
            "Orders were missed trying to be added",
            {"fetched": len(fetched_orders), "new": new_count},
        )

    try:
        repo.create_batch(orders_to_insert)
    except Exception as e:
        raise PersistenceError(f"Failed to insert orders: {e}") from e

    logger.info(
        "Orders ingested",
        fetched=len(fetched_orders),
        new=new_count,
        inserted=len(orders_to_insert),
        skipped=new_count - len(orders_to_insert),
    )
    return len(orders_to_insert)
