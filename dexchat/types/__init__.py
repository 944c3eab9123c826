from .envelope import EnvelopeStatus, ResponseEnvelope

__all__ = [
    "EnvelopeStatus",
    "ResponseEnvelope",
]
