import unittest
from decimal import Decimal

from movies.errors import MovieValidationError
from movies.validation import coerce_budget, validate_create, validate_update


def _payload(**overrides):
    payload = {
        "title": "Show A",
        "type": "TV Shows",
        "director": "D",
        "budget": "1000.5",
        "location": "L",
        "duration": "45m",
        "year": "2020",
    }
    payload.update(overrides)
    return payload


class TestCoerceBudget(unittest.TestCase):
    def test_numeric_string_is_rounded_to_cents(self) -> None:
        self.assertEqual(coerce_budget("1000.5"), Decimal("1000.50"))
        self.assertEqual(str(coerce_budget("1000.5")), "1000.50")

    def test_numbers_are_accepted(self) -> None:
        self.assertEqual(coerce_budget(1000), Decimal("1000.00"))
        self.assertEqual(coerce_budget(10.005), Decimal("10.01"))

    def test_surrounding_whitespace_is_ignored(self) -> None:
        self.assertEqual(coerce_budget("  12 "), Decimal("12.00"))

    def test_unparsable_values_become_zero(self) -> None:
        for raw in ("abc", "12abc", "NaN", "Infinity", "1_000", "   "):
            with self.subTest(raw=raw):
                self.assertEqual(coerce_budget(raw), Decimal("0.00"))

    def test_negative_and_oversized_values_become_zero(self) -> None:
        self.assertEqual(coerce_budget("-5"), Decimal("0.00"))
        self.assertEqual(coerce_budget(1e20), Decimal("0.00"))
        self.assertEqual(coerce_budget("9999999999999.99"), Decimal("9999999999999.99"))

    def test_only_decimal_notation_is_read(self) -> None:
        self.assertEqual(coerce_budget("1e3"), Decimal("1000.00"))
        for raw in ("0x10", "0b101", "0o17"):
            with self.subTest(raw=raw):
                self.assertEqual(coerce_budget(raw), Decimal("0.00"))


class TestValidateCreate(unittest.TestCase):
    def test_valid_payload_is_normalized(self) -> None:
        values = validate_create(_payload())
        self.assertEqual(values["title"], "Show A")
        self.assertEqual(values["type"], "TV Shows")
        self.assertEqual(values["budget"], Decimal("1000.50"))
        self.assertEqual(
            set(values),
            {"title", "type", "director", "budget", "location", "duration", "year"},
        )

    def test_unknown_fields_are_dropped(self) -> None:
        values = validate_create(_payload(rating=9, id=42))
        self.assertNotIn("rating", values)
        self.assertNotIn("id", values)

    def test_non_numeric_budget_is_stored_as_zero(self) -> None:
        values = validate_create(_payload(budget="abc"))
        self.assertEqual(values["budget"], Decimal("0.00"))

    def test_missing_field_is_rejected(self) -> None:
        payload = _payload()
        del payload["director"]
        with self.assertRaises(MovieValidationError) as ctx:
            validate_create(payload)
        self.assertIn("director", ctx.exception.message)

    def test_missing_budget_is_rejected(self) -> None:
        payload = _payload()
        del payload["budget"]
        with self.assertRaises(MovieValidationError):
            validate_create(payload)

    def test_unknown_type_is_rejected(self) -> None:
        with self.assertRaises(MovieValidationError) as ctx:
            validate_create(_payload(type="Cartoons"))
        self.assertIn("type", ctx.exception.message)

    def test_text_fields_must_be_strings(self) -> None:
        with self.assertRaises(MovieValidationError) as ctx:
            validate_create(_payload(year=2020))
        self.assertIn("year", ctx.exception.message)

    def test_length_limits(self) -> None:
        validate_create(_payload(title="x" * 255, duration="d" * 100, year="y" * 50))
        for field, size in (("title", 256), ("director", 256), ("location", 256), ("duration", 101), ("year", 51)):
            with self.subTest(field=field):
                with self.assertRaises(MovieValidationError):
                    validate_create(_payload(**{field: "x" * size}))

    def test_empty_strings_are_rejected(self) -> None:
        with self.assertRaises(MovieValidationError):
            validate_create(_payload(title=""))
        with self.assertRaises(MovieValidationError):
            validate_create(_payload(budget=""))

    def test_boolean_and_null_budget_are_rejected(self) -> None:
        with self.assertRaises(MovieValidationError):
            validate_create(_payload(budget=True))
        with self.assertRaises(MovieValidationError):
            validate_create(_payload(budget=None))

    def test_non_object_payload_is_rejected(self) -> None:
        for payload in (None, [], "movie", 3):
            with self.subTest(payload=payload):
                with self.assertRaises(MovieValidationError):
                    validate_create(payload)


class TestValidateUpdate(unittest.TestCase):
    def test_partial_payload_keeps_only_given_fields(self) -> None:
        values = validate_update({"title": "New title", "extra": True})
        self.assertEqual(values, {"title": "New title"})

    def test_budget_is_coerced(self) -> None:
        self.assertEqual(validate_update({"budget": "12.3"}), {"budget": Decimal("12.30")})
        self.assertEqual(validate_update({"budget": "oops"}), {"budget": Decimal("0.00")})

    def test_empty_payload_is_rejected(self) -> None:
        with self.assertRaises(MovieValidationError):
            validate_update({})

    def test_only_unknown_fields_is_rejected(self) -> None:
        with self.assertRaises(MovieValidationError):
            validate_update({"rating": 5, "genre": "Drama"})

    def test_null_values_are_rejected(self) -> None:
        with self.assertRaises(MovieValidationError) as ctx:
            validate_update({"title": None})
        self.assertIn("title", ctx.exception.message)

    def test_field_rules_still_apply(self) -> None:
        with self.assertRaises(MovieValidationError):
            validate_update({"type": "Podcasts"})
        with self.assertRaises(MovieValidationError):
            validate_update({"duration": "x" * 101})


if __name__ == "__main__":
    unittest.main()
