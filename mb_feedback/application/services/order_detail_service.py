"""Order detail service: backfills product codes for orders without details."""

import structlog

from mb_feedback.core.exceptions import FetchError, PersistenceError
from mb_feedback.domain.gateways import OrderFetcher
from mb_feedback.domain.models.order import Order
from mb_feedback.domain.repositories.order_detail_repository import OrderDetailRepository
from mb_feedback.domain.repositories.order_repository import OrderRepository
from mb_feedback.domain.schemas.order import OrderListParams
from mb_feedback.domain.schemas.order_detail import OrderDetailCreate

logger = structlog.get_logger(__name__)


async def _backfill_order(order: Order, detail_repo: OrderDetailRepository, fetcher: OrderFetcher) -> int:
    try:
        product_codes = await fetcher.fetch_product_codes(order.external_order_id)
    except Exception as e:
        raise FetchError(
            f"Failed to fetch product codes for order {order.external_order_id}: {e}",
            {"order_id": order.external_order_id},
        ) from e

    if not product_codes:
        logger.warning("Broker returned no product codes", order_id=order.external_order_id)
        return 0

    details = [OrderDetailCreate(order_id=order.id, product_code=code) for code in product_codes]
    try:
        detail_repo.create_batch(details)
    except Exception as e:
        raise PersistenceError(
            f"Failed to create order details for order {order.external_order_id}: {e}",
            {"order_id": order.external_order_id},
        ) from e

    return len(details)


async def backfill_product_details(
    order_repo: OrderRepository,
    detail_repo: OrderDetailRepository,
    fetcher: OrderFetcher,
) -> int:
    """Fetch and store product codes for every order that has no details yet.

    Orders are processed one by one. The first failure aborts the run: details
    already stored for earlier orders are kept, later orders are left for the
    next trigger (they are still selected as missing).
    """
    missing_orders = order_repo.list_without_details(OrderListParams())
    if not missing_orders:
        logger.info("No orders without details")
        return 0

    created = 0
    for order in missing_orders:
        created += await _backfill_order(order, detail_repo, fetcher)

    logger.info("Product details backfilled", orders=len(missing_orders), details=created)
    return created
