import unittest
from dataclasses import dataclass

from typedconf.validation import (
    AllowedValues, MaxLength, MinLength, Range, RegularExpression, Required,
    StringLength, constraint_table, setting
)


@dataclass
class ServerSettings:
    host: str = setting(Required(), StringLength(64))
    port: int = setting(Range(1, 65535), default=8080)
    scheme: str = setting(AllowedValues("http", "https"), default="http")
    tags: list = setting(MaxLength(3), default_factory=list)
    comment: str = ""


class TestConstraints(unittest.TestCase):
    """Test individual constraint checks and their default messages."""

    def test_required(self):
        constraint = Required()
        self.assertFalse(constraint.is_valid(None))
        self.assertFalse(constraint.is_valid(""))
        self.assertFalse(constraint.is_valid("   "))
        self.assertTrue(constraint.is_valid("x"))
        self.assertTrue(constraint.is_valid(0))
        self.assertTrue(Required(allow_empty_strings=True).is_valid(""))
        self.assertEqual(constraint.format_message("host"), "The host field is required.")

    def test_range_is_inclusive(self):
        constraint = Range(1, 100)
        self.assertTrue(constraint.is_valid(1))
        self.assertTrue(constraint.is_valid(100))
        self.assertFalse(constraint.is_valid(0))
        self.assertFalse(constraint.is_valid(101))
        self.assertTrue(constraint.is_valid(None))
        self.assertFalse(constraint.is_valid("50"))
        self.assertEqual(constraint.format_message("range_property"),
                         "The field range_property must be between 1 and 100.")

    def test_range_rejects_inverted_bounds(self):
        with self.assertRaises(ValueError):
            Range(10, 1)

    def test_string_length(self):
        constraint = StringLength(5, minimum=2)
        self.assertTrue(constraint.is_valid("abc"))
        self.assertFalse(constraint.is_valid("a"))
        self.assertFalse(constraint.is_valid("abcdef"))
        self.assertIn("minimum length of 2", constraint.format_message("name"))

    def test_min_and_max_length(self):
        self.assertTrue(MinLength(2).is_valid([1, 2]))
        self.assertFalse(MinLength(2).is_valid([1]))
        self.assertTrue(MaxLength(2).is_valid("ab"))
        self.assertFalse(MaxLength(2).is_valid("abc"))

    def test_regular_expression_matches_full_value(self):
        constraint = RegularExpression(r"[A-Z]{3}")
        self.assertTrue(constraint.is_valid("USD"))
        self.assertFalse(constraint.is_valid("USDT"))
        self.assertTrue(constraint.is_valid(""))

    def test_allowed_values(self):
        constraint = AllowedValues("a", "b")
        self.assertTrue(constraint.is_valid("a"))
        self.assertFalse(constraint.is_valid("c"))

    def test_custom_message_placeholder(self):
        constraint = Range(1, 10, error_message="{field} is out of bounds")
        self.assertEqual(constraint.format_message("retries"), "retries is out of bounds")


class TestConstraintTable(unittest.TestCase):
    """Test the per-type constraint table."""

    def test_table_follows_field_declaration_order(self):
        table = constraint_table(ServerSettings)
        self.assertEqual(
            [(row.field_name, row.kind) for row in table],
            [("host", "required"), ("host", "string_length"), ("port", "range"),
             ("scheme", "allowed_values"), ("tags", "max_length")]
        )

    def test_table_is_built_once_per_type(self):
        self.assertIs(constraint_table(ServerSettings), constraint_table(ServerSettings))

    def test_setting_keeps_defaults(self):
        settings = ServerSettings(host="example")
        self.assertEqual(settings.port, 8080)
        self.assertEqual(settings.tags, [])

    def test_setting_rejects_non_constraints(self):
        with self.assertRaises(TypeError):
            setting("required")

    def test_table_requires_dataclass(self):
        with self.assertRaises(TypeError):
            constraint_table(object)

    def test_plain_field_metadata_is_preserved(self):
        @dataclass
        class Tagged:
            value: int = setting(Range(0, 1), default=0, metadata={"doc": "flag"})

        tagged_field = Tagged.__dataclass_fields__["value"]
        self.assertEqual(tagged_field.metadata["doc"], "flag")
        self.assertEqual(len(constraint_table(Tagged)), 1)


if __name__ == "__main__":
    unittest.main()
