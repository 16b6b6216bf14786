from .base import Codec, TypeAdapterCodec, dumps, loads
from .either import EitherCodec, LeftCodec, RightCodec
from .option import OptionCodec, PresentCodec

__all__ = [
    "Codec",
    "EitherCodec",
    "LeftCodec",
    "OptionCodec",
    "PresentCodec",
    "RightCodec",
    "TypeAdapterCodec",
    "dumps",
    "loads",
]
