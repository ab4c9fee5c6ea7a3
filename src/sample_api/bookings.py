from __future__ import annotations

from typing import Any

from aws_lambda_powertools import Logger
from pydantic import ValidationError

from lambda_http.events import NormalizedEvent
from lambda_http.handler import as_lambda_handler
from lambda_http.responses import HttpException, HttpSuccess

from . import dal
from .models import Booking, BookingCreate

logger = Logger()


def _current_user(event: NormalizedEvent) -> str:
    session: Any = event.session
    user_id = session.get("user_id") if isinstance(session, dict) else None
    if not isinstance(user_id, str) or not user_id:
        raise HttpException(401, "Unauthorized")
    return user_id


def _owned_booking(event: NormalizedEvent) -> Booking:
    user_id = _current_user(event)
    booking_id = event.params.get("booking_id")
    if not booking_id:
        raise HttpException(400, "Missing booking_id")
    try:
        booking = dal.get_booking(booking_id)
    except KeyError as exc:
        raise HttpException(404, dal.BOOKING_NOT_FOUND) from exc
    if booking.user_id != user_id:
        logger.info("Booking owned by another user", extra={"booking_id": booking_id})
        raise HttpException(403, "Forbidden")
    return booking


async def create_booking(event: NormalizedEvent) -> HttpSuccess:
    user_id = _current_user(event)
    try:
        payload = BookingCreate.model_validate(event.body)
    except ValidationError as exc:
        raise HttpException(400, "Invalid booking payload") from exc
    booking = dal.create_booking(user_id, payload)
    return HttpSuccess(201, booking, {"Location": f"/bookings/{booking.booking_id}"})


async def get_booking(event: NormalizedEvent) -> HttpSuccess:
    return HttpSuccess(200, _owned_booking(event))


async def cancel_booking(event: NormalizedEvent) -> HttpSuccess:
    booking = _owned_booking(event)
    return HttpSuccess(200, dal.cancel_booking(booking.booking_id))


create_handler = as_lambda_handler(create_booking)
get_handler = as_lambda_handler(get_booking)
cancel_handler = as_lambda_handler(cancel_booking)
