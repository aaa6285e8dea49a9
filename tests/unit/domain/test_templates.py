from conpanion.domain.entities import NotificationPriority, NotificationType
from conpanion.domain.templates import DEFAULT_TEMPLATES, render_template


def test_fills_placeholders_in_order():
    assert render_template("%s added you to %s", ["Ann", "Acme"]) == "Ann added you to Acme"


def test_literal_percent():
    assert render_template("100%% reviewed by %s", ["Bob"]) == "100% reviewed by Bob"


def test_enum_arguments_render_their_value():
    assert render_template("Priority: %s", [NotificationPriority.high]) == "Priority: high"


def test_none_argument_renders_empty():
    assert render_template("[%s]", [None]) == "[]"


def test_no_args_returns_raw_template():
    assert render_template("%s commented", []) == "%s commented"
    assert render_template("%s commented", None) == "%s commented"


def test_too_few_args_returns_raw_template():
    assert render_template("%s assigned you to %s", ["Ann"]) == "%s assigned you to %s"


def test_more_than_five_args_returns_raw_template():
    pattern = "%s %s %s %s %s %s"
    assert render_template(pattern, ["a", "b", "c", "d", "e", "f"]) == pattern


def test_unsupported_placeholder_returns_raw_template():
    assert render_template("%d items", ["3"]) == "%d items"


def test_missing_template_renders_empty():
    assert render_template(None, ["x"]) == ""


def test_default_templates_are_unique_per_type_and_name():
    keys = [(seed.type, seed.name) for seed in DEFAULT_TEMPLATES]
    assert len(keys) == len(set(keys))


def test_every_type_has_a_default_template():
    types_with_default = {seed.type for seed in DEFAULT_TEMPLATES if seed.name == "default"}
    assert types_with_default == set(NotificationType)
