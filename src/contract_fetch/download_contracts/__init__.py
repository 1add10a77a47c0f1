from .explorer_client import Envelope, RawEntry, contract_url, decode_envelope, fetch
from .source_parser import SourceBundle, StandardJsonInput, normalize, unwrap

__all__ = [
    "Envelope",
    "RawEntry",
    "SourceBundle",
    "StandardJsonInput",
    "contract_url",
    "decode_envelope",
    "fetch",
    "normalize",
    "unwrap",
]
