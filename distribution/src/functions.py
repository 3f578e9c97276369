from typing import List, Dict

from distribution.src import schemas
from distribution.src.exceptions import APIException, NotFound
from distribution.src.store import EntityStore


def fuseExceptionResponses(exceptions: List[APIException]) -> Dict[int, dict]:
    """
    Generate OpenAPI response documentation by fusing multiple APIException instances.

    Args:
        exceptions (List[APIException]): List of instantiated exceptions.

    Returns:
        Dict[int, dict]: A dictionary of OpenAPI response specs grouped by status code.
    """
    responses = {}

    for exception in exceptions:
        status_code = exception.status_code
        example_key = type(exception).__name__
        example_value = {
            "summary": str(exception.headers),
            "value": {"detail": exception.detail},
        }

        if status_code not in responses:
            responses[status_code] = {
                "model": schemas.ErrorResponse,
                "content": {
                    "application/json": {"examples": {example_key: example_value}}
                },
            }
        else:
            responses[status_code]["content"]["application/json"]["examples"][
                example_key
            ] = example_value

    return responses


def updateIfChanged(targetObj, sourceObj, fields: List[str]) -> None:
    """
    Update attributes on a target object from a source object
    only if the values differ and the new value is not None.

    Designed for use with SQLAlchemy models, where `fields` are typically
    provided as `Model.field.key`.

    Example:
        >>> updateIfChanged(fare, fParam, [Fare.fare_code.key])
        # fare is updated where values differ; None values are skipped silently
    """
    for field in fields:
        new_value = getattr(sourceObj, field, None)
        if new_value is not None:
            old_value = getattr(targetObj, field)
            if old_value != new_value:
                setattr(targetObj, field, new_value)


def overwrite(targetObj, sourceObj, fields: List[str]) -> None:
    """
    Copy attributes from a source object onto a target object, None included.

    Unlike `updateIfChanged`, a field missing from the request clears the
    stored value.

    Example:
        >>> overwrite(route, fParam, [Route.route_name.key, Route.status.key])
    """
    for field in fields:
        setattr(targetObj, field, getattr(sourceObj, field, None))


def getOr404(store: EntityStore, id: str):
    """Fetch an entity by id, raising `NotFound` when it does not exist."""
    entity = store.findById(id)
    if entity is None:
        raise NotFound(store.model, id)
    return entity


def changeStatus(
    store: EntityStore, id: str, newStatus: str, skipUnchanged: bool = False
):
    """
    Move an entity to a new status.

    Args:
        store (EntityStore): Store of the entity kind.
        id (str): Identifier of the entity.
        newStatus (str): The requested status.
        skipUnchanged (bool): When True and the entity already has `newStatus`,
            the entity is returned as is without being written.

    Returns:
        The (possibly updated) entity.

    Raises:
        NotFound: If the id does not resolve.
    """
    entity = getOr404(store, id)
    if skipUnchanged and entity.status == newStatus:
        return entity
    entity.status = newStatus
    return store.save(entity)
