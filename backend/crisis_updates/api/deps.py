from fastapi import Request

from crisis_updates.services.crisis_store import CrisisUpdateStore


def get_store(request: Request) -> CrisisUpdateStore:
    """
    Dependency returning the store owned by the running application.
    """
    return request.app.state.store
