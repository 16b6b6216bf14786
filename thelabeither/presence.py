from typing import Any

import pydantic

from .codecs.schema import OMITTED_FIELD
from .option import Absent


class PresenceModel(pydantic.BaseModel):
    """
    Pydantic model that leaves `Absent` fields out of its dumped output, so
    that an `Option` field round-trips through all three JSON states:

    ```py
    class Patch(PresenceModel):
        nickname: Option[str | None] = ABSENT

    Patch().model_dump_json()                           # '{}'
    Patch(nickname=Present(None)).model_dump_json()     # '{"nickname":null}'
    Patch.model_validate_json('{"nickname":"Bob"}')     # nickname=Present('Bob')
    ```

    Plain ``pydantic.BaseModel`` subclasses get the same result when dumped
    with ``exclude_defaults=True``, provided each Option field defaults to
    ``ABSENT``. Dumping an `Absent` anywhere else raises
    `AbsentValueEncodeError`.
    """

    @pydantic.model_serializer(mode="wrap")
    def _omit_absent_fields(
        self,
        handler: pydantic.SerializerFunctionWrapHandler,
    ) -> dict[str, Any]:
        fields = type(self).model_fields
        absent = [
            name
            for name in fields
            if isinstance(self.__dict__.get(name), Absent)
        ]
        if not absent:
            return handler(self)

        placeholder = self.model_copy(
            update={name: OMITTED_FIELD for name in absent}
        )
        data: dict[str, Any] = handler(placeholder)
        for name in absent:
            field = fields[name]
            # The output key depends on by_alias, serialize_by_alias and which
            # alias is set. Drop whichever one was written.
            for key in (field.serialization_alias, field.alias, name):
                if key is not None and key in data and data[key] is None:
                    del data[key]
                    break
        return data


__all__ = [
    "PresenceModel",
]
