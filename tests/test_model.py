import pytest

from modelmap.dispatch import DEFAULT, derive
from modelmap.model import (
    ModelTag,
    default_connection,
    primary_key_values,
    primary_keys,
    table_name,
)


def test_table_name_of_string_is_verbatim() -> None:
    assert table_name("ABC") == "ABC"


def test_table_name_of_tag_is_lower_cased_name() -> None:
    assert table_name(ModelTag("abc")) == "abc"
    assert table_name(ModelTag.parse("ns/abc")) == "abc"
    assert table_name(ModelTag.parse("ns/Venues")) == "venues"


def test_table_name_of_class() -> None:
    class Person:
        pass

    class Venue:
        __tablename__ = "venue_v2"

    assert table_name(Person) == "person"
    assert table_name(Venue) == "venue_v2"


def test_table_name_unsupported_model() -> None:
    with pytest.raises(TypeError):
        table_name(42)


def test_table_name_override_follows_hierarchy() -> None:
    base = ModelTag.parse("shop/base")
    orders = ModelTag.parse("shop/orders")
    derive(orders, base)

    @table_name.default(base)
    def _shop_table(next_method, model):
        return "shop_" + next_method(model)

    assert table_name(orders) == "shop_orders"
    assert table_name(ModelTag("other")) == "other"


def test_model_tag_parse() -> None:
    tag = ModelTag.parse("ns/abc")
    assert tag == ModelTag("abc", "ns")
    assert str(tag) == "ns/abc"
    assert ModelTag.parse("abc") == ModelTag("abc")
    assert ModelTag.parse("a/b/c") == ModelTag("c", "a/b")
    assert repr(ModelTag("abc")) == "ModelTag('abc')"
    with pytest.raises(ValueError, match="empty name"):
        ModelTag.parse("ns/")


def test_primary_keys_default_and_normalisation() -> None:
    assert primary_keys("people") == ("id",)

    @primary_keys.default("orders")
    def _orders_pk(next_method, model):
        return ["shop_id", "order_no"]

    @primary_keys.default("venues")
    def _venues_pk(next_method, model):
        return "venue_id"

    assert primary_keys("orders") == ("shop_id", "order_no")
    assert primary_keys("venues") == ("venue_id",)


def test_primary_key_values() -> None:
    @primary_keys.default("orders")
    def _orders_pk(next_method, model):
        return ("shop_id", "order_no")

    row = {"order_no": 7, "shop_id": 3, "total": 10}
    assert list(primary_key_values("orders", row).items()) == [("shop_id", 3), ("order_no", 7)]
    assert primary_key_values("people", {"name": "Cam"}) == {"id": None}


def test_default_connection_is_none_unless_registered() -> None:
    sentinel = object()
    assert default_connection("people") is None

    default_connection.register_default("people", lambda next_method, model: sentinel)
    assert default_connection("people") is sentinel
    assert default_connection(DEFAULT) is None
