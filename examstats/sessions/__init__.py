from .segmenter import SESSION_GAP, segment, segment_stream, segment_user

__all__ = ["SESSION_GAP", "segment", "segment_stream", "segment_user"]
