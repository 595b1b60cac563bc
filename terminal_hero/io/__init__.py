from .track_loader import list_tracks, load_track

__all__ = ["list_tracks", "load_track"]
