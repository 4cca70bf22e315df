# core/settlement.py
import logging
from contextlib import contextmanager

from django.db import DatabaseError, transaction

from .errors import SettlementFailedError

logger = logging.getLogger(__name__)


@contextmanager
def settlement_unit(label: str):
    """
    One atomic settlement. Casino errors roll back and propagate as they are;
    database failures roll back and surface as SettlementFailedError.
    """
    try:
        with transaction.atomic():
            yield
    except DatabaseError as exc:
        logger.error(f"{label} settlement rolled back: {exc}")
        raise SettlementFailedError() from exc
