"""API Routes for expense and income detail pages"""
from fastapi import APIRouter, HTTPException, Depends, Request, status
from fastapi.responses import RedirectResponse
from typing import Annotated
from motor.motor_asyncio import AsyncIOMotorCollection
import logging

from models.resource_kind import ResourceKind
from services.exceptions import BadInputError, BadRequestError, MissingIdentifierError, RecordNotFoundError
from services.record_endpoint import DeleteRedirect, RecordEndpoint, UpdateAcknowledgement, first_value

logger = logging.getLogger(__name__)


def build_record_router(kind: ResourceKind) -> APIRouter:
    """Builds the GET (read) and POST (update/delete) routes for one record kind."""
    router = APIRouter(prefix=kind.route_prefix, tags=[kind.name])

    # --- Dependency Function ---
    def get_endpoint(request: Request) -> RecordEndpoint:
        """Dependency wiring the kind's MongoDB collection from the request state into an endpoint."""
        db = getattr(request.state, "db", None)
        if db is None:
            logger.error(f"Database not found in application state while serving {kind.name}. Check MongoDB connection.")
            raise HTTPException(status_code=503, detail="Database unavailable")
        collection: AsyncIOMotorCollection = db.get_collection(kind.collection_name)
        return RecordEndpoint(kind, collection)

    EndpointDep = Annotated[RecordEndpoint, Depends(get_endpoint)]

    @router.get("/{record_id}", response_model=kind.record_model, summary=f"Get {kind.name}")
    async def read_record(record_id: str, endpoint: EndpointDep):
        logger.info(f"GET {kind.route_prefix}/{record_id} endpoint called.")
        try:
            return await endpoint.read(record_id)
        except RecordNotFoundError as nf:
            logger.warning(f"{nf}")
            raise HTTPException(status_code=404, detail="Not found")
        except MissingIdentifierError as me:
            logger.error(f"Routing error reading {kind.name}: {me}")
            raise HTTPException(status_code=500, detail="Server error")
        except ConnectionError as ce:
            logger.error(f"Connection error reading {kind.name} '{record_id}': {ce}")
            raise HTTPException(status_code=503, detail="Database unavailable")
        except Exception as e:
            logger.exception(f"Unexpected error reading {kind.name} '{record_id}': {e}")
            raise HTTPException(status_code=500, detail="Server error")

    @router.post(
        "/{record_id}",
        response_model=UpdateAcknowledgement,
        summary=f"Update or delete {kind.name}",
        description="Form submission carrying intent=update (with title, description, amount) or intent=delete.",
    )
    async def write_record(record_id: str, request: Request, endpoint: EndpointDep):
        form = await request.form()
        origin = request.headers.get("referer")
        logger.info(f"POST {kind.route_prefix}/{record_id} endpoint called with intent '{first_value(form, 'intent')}'")
        try:
            outcome = await endpoint.submit(record_id, form, origin=origin)
        except RecordNotFoundError as nf:
            logger.warning(f"{nf}")
            raise HTTPException(status_code=404, detail="Not found")
        except BadRequestError as br:
            logger.warning(f"Rejected {kind.name} write: {br}")
            raise HTTPException(status_code=400, detail="Bad request")
        except BadInputError as bi:
            logger.warning(f"Rejected {kind.name} update for '{record_id}': {'; '.join(bi.problems)}")
            raise HTTPException(status_code=400, detail="Bad input")
        except MissingIdentifierError as me:
            logger.error(f"Routing error writing {kind.name}: {me}")
            raise HTTPException(status_code=500, detail="Server error")
        except ConnectionError as ce:
            logger.error(f"Connection error writing {kind.name} '{record_id}': {ce}")
            raise HTTPException(status_code=503, detail="Database unavailable")
        except Exception as e:
            logger.exception(f"Unexpected error writing {kind.name} '{record_id}': {e}")
            raise HTTPException(status_code=500, detail="Server error")
        finally:
            await form.close()

        if isinstance(outcome, DeleteRedirect):
            return RedirectResponse(url=outcome.location, status_code=status.HTTP_302_FOUND)
        return outcome

    return router
