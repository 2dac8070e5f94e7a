from __future__ import annotations

import logging
from typing import Callable, Optional, TypeVar

from flask import jsonify

from ..core.exceptions import DomainError, DuplicateRollError, StorageWriteError, StudentNotFoundError, ValidationError

logger = logging.getLogger(__name__)

T = TypeVar("T")


def error_response(e: DomainError):
    if isinstance(e, DuplicateRollError):
        status = 409
    elif isinstance(e, StudentNotFoundError):
        status = 404
    elif isinstance(e, ValidationError):
        status = 400
    else:
        status = 500
    return jsonify({"success": False, "message": str(e)}), status


def apply_mutation(mutation: Callable[[], T]) -> tuple[Optional[T], Optional[str]]:
    """Run a store mutation, turning a failed write into a warning.

    The store keeps the change in memory when persisting fails, so the request
    still succeeds; the returned warning tells the user it was not saved.
    """

    try:
        return mutation(), None
    except StorageWriteError as e:
        logger.warning("Mutation applied in memory only: %s", e)
        return None, str(e)


def ok(payload: dict, *, warning: Optional[str] = None, status: int = 200):
    body = {"success": True, **payload}
    if warning:
        body["warning"] = warning
    return jsonify(body), status
