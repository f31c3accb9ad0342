from api import state
from api.backend import BackendAPI
from extraction.facade import ExtractionFacade


def get_facade() -> ExtractionFacade:
    if state.facade is None:
        state.facade = ExtractionFacade()
    return state.facade


def get_backend() -> BackendAPI:
    return BackendAPI(get_facade())
