from .session import PlaySession, SessionResult, SessionSnapshot

__all__ = ["PlaySession", "SessionResult", "SessionSnapshot"]
