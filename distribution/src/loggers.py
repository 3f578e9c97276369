from distribution.src import openobserve
from distribution.src.schemas import RequestInfo


def logEvent(requestInfo: RequestInfo, data: dict) -> None:
    """
    Log an event to OpenObserve with request context.

    Args:
        requestInfo (RequestInfo): Metadata about the current request.
        data (dict): Additional event-specific details to include in the log.

    Notes:
        - Automatically attaches `_method` and `_path`.
        - `data` must already be JSON compatible (see `jsonable_encoder`).
    """
    logDetails = {
        "_method": requestInfo.method,
        "_path": requestInfo.path,
    }
    logDetails.update(data)
    openobserve.logEvent(logDetails)
