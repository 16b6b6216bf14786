import django_stubs_ext

# Field classes are subscripted below (``JSONField[T, T]``)
django_stubs_ext.monkeypatch()

from .codec import CodecField, EitherField, PresenceModelField  # NOQA

__all__ = [
    "CodecField",
    "EitherField",
    "PresenceModelField",
]
