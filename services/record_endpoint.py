"""Read / update / delete handling for one record, generic over the record kind."""
import logging
from enum import Enum
from typing import Any, Mapping, Optional, Union

from motor.motor_asyncio import AsyncIOMotorCollection
from pydantic import BaseModel, ValidationError

from models.record import Record, RecordUpdate
from models.resource_kind import ResourceKind
from services import records_service
from services.exceptions import BadInputError, BadRequestError, MissingIdentifierError, RecordNotFoundError
from utils.redirects import resolve_delete_redirect

logger = logging.getLogger(__name__)


class Intent(str, Enum):
    UPDATE = "update"
    DELETE = "delete"


class UpdateAcknowledgement(BaseModel):
    success: bool = True


class DeleteRedirect(BaseModel):
    location: str


WriteOutcome = Union[UpdateAcknowledgement, DeleteRedirect]


def first_value(fields: Mapping[str, Any], name: str) -> Any:
    """Returns the first submitted value for `name`; form payloads may repeat a key."""
    getlist = getattr(fields, "getlist", None)
    if getlist is None:
        return fields.get(name)
    values = getlist(name)
    return values[0] if values else None


def decode_update(fields: Mapping[str, Any]) -> RecordUpdate:
    """Validates a submitted form payload into a RecordUpdate, or raises BadInputError."""
    payload = {name: first_value(fields, name) for name in RecordUpdate.model_fields}
    try:
        return RecordUpdate(**payload)
    except ValidationError as e:
        problems = [f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()]
        raise BadInputError("Invalid update fields", problems)


def parse_intent(value: Any) -> Intent:
    if not isinstance(value, str):
        raise BadRequestError("Missing intent")
    try:
        return Intent(value)
    except ValueError:
        raise BadRequestError(f"Unknown intent '{value}'")


class RecordEndpoint:
    """
    Handles one request against a single record of `kind`.

    The collection is passed in rather than looked up globally so that tests
    can hand over an in-memory double. Nothing is cached between calls.
    """

    def __init__(self, kind: ResourceKind, collection: AsyncIOMotorCollection):
        self.kind = kind
        self.collection = collection

    def _require_id(self, record_id: Optional[str]) -> str:
        if not record_id:
            raise MissingIdentifierError("id route parameter is required")
        return record_id

    async def read(self, record_id: Optional[str]) -> Record:
        record_id = self._require_id(record_id)
        record = await records_service.find_record(self.collection, record_id, self.kind.record_model)
        if record is None:
            raise RecordNotFoundError(self.kind.name, record_id)
        return record

    async def update(self, record_id: Optional[str], fields: Mapping[str, Any]) -> UpdateAcknowledgement:
        record_id = self._require_id(record_id)
        changes = decode_update(fields)
        matched = await records_service.update_record(self.collection, record_id, changes.model_dump())
        if not matched:
            raise RecordNotFoundError(self.kind.name, record_id)
        logger.info(f"Updated {self.kind.name} '{record_id}'")
        return UpdateAcknowledgement()

    async def delete(self, record_id: Optional[str], origin: Optional[str] = None) -> DeleteRedirect:
        record_id = self._require_id(record_id)
        deleted = await records_service.delete_record(self.collection, record_id)
        if not deleted:
            raise RecordNotFoundError(self.kind.name, record_id)
        location = resolve_delete_redirect(origin, record_id, self.kind.listing_path)
        logger.info(f"Deleted {self.kind.name} '{record_id}', redirecting to {location}")
        return DeleteRedirect(location=location)

    async def submit(self, record_id: Optional[str], fields: Mapping[str, Any], origin: Optional[str] = None) -> WriteOutcome:
        """Dispatches a write request on its `intent` field."""
        record_id = self._require_id(record_id)
        intent = parse_intent(first_value(fields, "intent"))
        if intent is Intent.DELETE:
            return await self.delete(record_id, origin)
        return await self.update(record_id, fields)
