from __future__ import annotations

import os
import uuid
from typing import TYPE_CHECKING, Any

import boto3
from aws_lambda_powertools import Logger

if TYPE_CHECKING:
    from mypy_boto3_dynamodb.service_resource import Table as DynamoDBTable
else:
    DynamoDBTable = Any  # type: ignore[assignment]

from .models import Booking, BookingCreate

logger = Logger()

_table: DynamoDBTable = boto3.resource("dynamodb").Table(os.environ.get("TABLE_NAME", "bookings"))

BOOKING_NOT_FOUND = "Booking not found"


def create_booking(user_id: str, payload: BookingCreate) -> Booking:
    booking = Booking(booking_id=str(uuid.uuid4()), user_id=user_id, **payload.model_dump())
    logger.info("Storing booking", extra={"booking_id": booking.booking_id})
    # datetimes are kept as ISO-8601 strings
    _table.put_item(Item=booking.model_dump(mode="json"))
    return booking


def get_booking(booking_id: str) -> Booking:
    item = _table.get_item(Key={"booking_id": booking_id}).get("Item")
    if item is None:
        raise KeyError(BOOKING_NOT_FOUND)
    return Booking.model_validate(item)


def cancel_booking(booking_id: str) -> Booking:
    updated = _table.update_item(
        Key={"booking_id": booking_id},
        UpdateExpression="SET #status = :cancelled",
        ExpressionAttributeNames={"#status": "status"},
        ExpressionAttributeValues={":cancelled": "cancelled"},
        ReturnValues="ALL_NEW",
    )
    return Booking.model_validate(updated["Attributes"])
