# app/tasks/discounts.py
import json
from datetime import datetime
from typing import Any, Dict, Iterable

from app.celery_worker import celery_app
from app.data.database import SessionLocal
from app.domain.pricing import coerce_discount, discount_status
from app.services.document_store import DISCOUNTS, DocumentStore
from app.services.storage import KeyValueStorage, RedisStorage, redis_client
from app.utils.dates import now_utc
from app.utils.logging import get_logger

logger = get_logger(__name__)

STATUS_KEY = "discountStatus"


def _load_previous(storage: KeyValueStorage) -> Dict[str, str]:
    raw = storage.get_item(STATUS_KEY)
    if not raw:
        return {}

    try:
        previous = json.loads(raw)
        if not isinstance(previous, dict):
            raise ValueError("status payload is not an object")
        return previous
    except (ValueError, TypeError) as e:
        #uszkodzony stan -> zaczynamy od zera, nastepny przebieg zapisze poprawny
        logger.warning(f"Discarding unreadable {STATUS_KEY}: {e}")
        return {}


def sweep_discount_windows(
    discounts: Iterable[Dict[str, Any]],
    storage: KeyValueStorage,
    now: datetime,
) -> Dict[str, Any]:
    """
    Porownuje status kazdego rabatu z poprzednim przebiegiem i loguje przejscia
    (Scheduled -> Active, Active -> Expired, ...). Uszkodzone rabaty trafiaja do logu admina.
    """
    previous = _load_previous(storage)

    current: Dict[str, str] = {}
    transitions = []
    malformed = []

    for doc in discounts:
        discount = coerce_discount(doc, warn=False)
        if discount is None:
            malformed.append(doc.get("id"))
            logger.warning(f"Discount {doc.get('id')!r} is malformed and never applies")
            continue

        status = discount_status(discount, now)
        current[discount.id] = status

        before = previous.get(discount.id)
        if before is not None and before != status:
            transitions.append({"id": discount.id, "from": before, "to": status})
            logger.info(f"Discount {discount.id}: {before} -> {status}")

    storage.set_item(STATUS_KEY, json.dumps(current))
    return {"checked": len(current), "transitions": transitions, "malformed": malformed}


@celery_app.task(name="app.tasks.discounts.sweep_discount_windows_task")
def sweep_discount_windows_task():
    logger.info("Discount window sweep started")

    store = DocumentStore(SessionLocal)
    storage = RedisStorage(redis_client(), "sweep")
    result = sweep_discount_windows(store.list_documents(DISCOUNTS), storage, now_utc())

    logger.info(
        f"Discount window sweep finished: {result['checked']} checked, "
        f"{len(result['transitions'])} transitions, {len(result['malformed'])} malformed"
    )
    return result
