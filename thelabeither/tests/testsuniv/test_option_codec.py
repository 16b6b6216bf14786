from typing import Any

from django.test import SimpleTestCase

from thelabeither import ABSENT, Left, Option, Present
from thelabeither.codecs import (
    EitherCodec,
    OptionCodec,
    PresentCodec,
    TypeAdapterCodec,
    dumps,
    loads,
)
from thelabeither.errors import AbsentValueEncodeError, EncodeError, InvalidValueError


class OptionCodecTest(SimpleTestCase):
    def setUp(self) -> None:
        self.codec = OptionCodec(TypeAdapterCodec(str | None))

    def encode(self, value: Option[str | None]) -> dict[str, Any]:
        doc: dict[str, Any] = {}
        self.codec.encode_field(doc, "value", value)
        return doc

    def test_encode_absent_omits_key(self) -> None:
        self.assertEqual(self.encode(ABSENT), {})

    def test_encode_present_null(self) -> None:
        doc = self.encode(Present(None))
        self.assertEqual(doc, {"value": None})
        self.assertIn("value", doc)

    def test_encode_present_value(self) -> None:
        self.assertEqual(self.encode(Present("value")), {"value": "value"})

    def test_encode_leaves_other_keys_alone(self) -> None:
        doc: dict[str, Any] = {"other": 1}
        self.codec.encode_field(doc, "value", ABSENT)
        self.assertEqual(doc, {"other": 1})

    def test_decode_missing_key(self) -> None:
        self.assertIs(self.codec.decode_field({}, "value"), ABSENT)
        self.assertIs(self.codec.decode_field({"other": 1}, "value"), ABSENT)

    def test_decode_null(self) -> None:
        self.assertEqual(
            self.codec.decode_field({"value": None}, "value"),
            Present(None),
        )

    def test_decode_value(self) -> None:
        self.assertEqual(
            self.codec.decode_field({"value": "value"}, "value"),
            Present("value"),
        )

    def test_round_trip(self) -> None:
        values: list[Option[str | None]] = [ABSENT, Present(None), Present("x")]
        for value in values:
            decoded = self.codec.decode_field(self.encode(value), "value")
            self.assertEqual(decoded, value)

    def test_decode_invalid_inner_value(self) -> None:
        codec = OptionCodec(TypeAdapterCodec(int))
        with self.assertRaises(InvalidValueError):
            codec.decode_field({"value": "abc"}, "value")

    def test_nested_as_inner_codec(self) -> None:
        codec = EitherCodec(self.codec, TypeAdapterCodec(int))
        self.assertEqual(dumps(codec, Left(Present(None))), '{"left":null}')
        self.assertEqual(loads(codec, '{"left":null}'), Left(Present(None)))
        with self.assertRaises(AbsentValueEncodeError):
            codec.encode(Left(ABSENT))

    def test_absent_through_type_adapter(self) -> None:
        codec = EitherCodec(
            TypeAdapterCodec(Option[str | None]),
            TypeAdapterCodec(int),
        )
        with self.assertRaises(EncodeError):
            codec.encode(Left(ABSENT))
        self.assertEqual(codec.encode(Left(Present(None))), {"left": None})
        self.assertEqual(codec.decode({"left": None}), Left(Present(None)))
        self.assertEqual(codec.decode({"left": "x"}), Left(Present("x")))


class PresentCodecTest(SimpleTestCase):
    def test_bare_value(self) -> None:
        codec = PresentCodec(TypeAdapterCodec(int))
        self.assertEqual(dumps(codec, Present(5)), "5")
        self.assertEqual(loads(codec, "5"), Present(5))
