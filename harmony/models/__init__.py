from .engine_state import EngineStateRecord

__all__ = [
    "EngineStateRecord",
]
