import random
from datetime import datetime, timezone
from decimal import Decimal

import pytest

from backend.app.core.errors import IndexOutOfRange, InvalidNumber, InvariantViolation
from backend.app.services.document_model import (
    add_item,
    ensure_persistable,
    generate_invoice_number,
    new_document,
    new_line_item,
    normalize_tags,
    recompute_totals,
    remove_item,
    reorder,
    set_tax_enabled,
    update_item,
)


def _doc(*items, tax_enabled=True):
    return new_document("INV-000001", "Acme", items=list(items), tax_enabled=tax_enabled)


def test_new_document_starts_with_one_blank_item():
    doc = new_document("INV-1")
    assert len(doc.items) == 1
    assert doc.items[0].unit == "pcs"
    assert doc.subtotal == 0
    assert doc.total == 0


def test_item_total_is_quantity_times_rate():
    doc = _doc(new_line_item("Dom", quantity=4950, unit="sqft", rate="33.33"))
    assert doc.items[0].total == Decimal("164983.50")
    assert doc.subtotal == Decimal("164983.50")


def test_tax_and_grand_total():
    doc = _doc(new_line_item("Lagan mandap", quantity=1, rate=165000))
    assert doc.subtotal == Decimal("165000")
    assert doc.tax == Decimal("29700")
    assert doc.total == Decimal("194700")


def test_tax_disabled_means_total_equals_subtotal():
    doc = _doc(new_line_item("Stage", quantity=2, rate=500), tax_enabled=False)
    assert doc.tax == 0
    assert doc.total == doc.subtotal == Decimal("1000")

    doc = set_tax_enabled(doc, True)
    assert doc.tax == Decimal("180")
    assert doc.total == Decimal("1180")


def test_update_numeric_field_recomputes():
    doc = _doc(new_line_item("Chair", quantity=10, rate=20))
    updated = update_item(doc, 0, "quantity", 25)
    assert updated.items[0].total == Decimal("500")
    assert updated.subtotal == Decimal("500")
    # input left untouched
    assert doc.items[0].quantity == 10


def test_update_text_field_keeps_totals():
    doc = _doc(new_line_item("Chair", quantity=10, rate=20))
    updated = update_item(doc, 0, "translated_description", "ખુરશી")
    assert updated.items[0].translated_description == "ખુરશી"
    assert updated.total == doc.total
    assert update_item(doc, 0, "unit", "").items[0].unit == "pcs"


def test_update_rejects_total_and_bad_values():
    doc = _doc(new_line_item("Chair", quantity=10, rate=20))
    with pytest.raises(InvariantViolation):
        update_item(doc, 0, "total", 5)
    with pytest.raises(InvalidNumber):
        update_item(doc, 0, "rate", -1)
    with pytest.raises(InvalidNumber):
        update_item(doc, 0, "quantity", float("nan"))
    with pytest.raises(IndexOutOfRange):
        update_item(doc, 3, "rate", 1)


def test_removing_the_last_item_fails_and_keeps_document():
    doc = _doc(new_line_item("Tent", quantity=1, rate=100))
    with pytest.raises(InvariantViolation):
        remove_item(doc, 0)
    assert len(doc.items) == 1
    assert doc.items[0].description == "Tent"


def test_remove_item_recomputes():
    doc = _doc(new_line_item("A", quantity=1, rate=100), new_line_item("B", quantity=1, rate=50))
    doc = remove_item(doc, 0)
    assert [item.description for item in doc.items] == ["B"]
    assert doc.subtotal == Decimal("50")


def test_add_item_appends_blank_row():
    doc = add_item(_doc(new_line_item("A", quantity=1, rate=100)))
    assert len(doc.items) == 2
    assert doc.items[1].quantity == 1
    assert doc.items[1].rate == 0
    assert doc.subtotal == Decimal("100")


def test_reorder_moves_item_and_keeps_totals():
    doc = _doc(new_line_item("A", rate=1), new_line_item("B", rate=2), new_line_item("C", rate=3))
    moved = reorder(doc, 0, 2)
    assert [item.description for item in moved.items] == ["B", "C", "A"]
    assert moved.subtotal == doc.subtotal
    with pytest.raises(IndexOutOfRange):
        reorder(doc, 0, 3)


def test_subtotal_always_matches_item_totals():
    doc = _doc(new_line_item("A", quantity="1.5", rate="10.10"), new_line_item("B", quantity=3, rate="0.99"))
    for step in range(3):
        doc = update_item(doc, step % 2, "rate", Decimal("7.25") + step)
        assert doc.subtotal == sum(item.quantity * item.rate for item in doc.items)
        assert doc.total == doc.subtotal + doc.tax


def test_recompute_with_custom_rate():
    doc = recompute_totals(_doc(new_line_item("A", quantity=1, rate=100)), tax_rate=5)
    assert doc.tax == Decimal("5")


def test_ensure_persistable_rejects_empty_document():
    doc = _doc(new_line_item("A"))
    with pytest.raises(InvariantViolation):
        ensure_persistable(doc.model_copy(update={"items": []}))


def test_generate_invoice_number_uses_last_six_millis_digits():
    now = datetime(2024, 1, 1, tzinfo=timezone.utc)
    millis = str(int(now.timestamp() * 1000))
    assert generate_invoice_number(now) == f"INV-{millis[-6:]}"


def test_normalize_tags():
    assert normalize_tags([" wedding ", "", "wedding", "vip"]) == ["wedding", "vip"]


def _check_totals(doc):
    assert doc.subtotal == sum((item.total for item in doc.items), Decimal(0))
    assert doc.subtotal == sum((item.quantity * item.rate for item in doc.items), Decimal(0))
    assert doc.total == doc.subtotal + doc.tax


@pytest.mark.parametrize("seed", range(8))
def test_subtotal_holds_across_mixed_edits(seed):
    rng = random.Random(seed)
    doc = _doc(new_line_item("Mandap", quantity=1, rate=165000), new_line_item("Chairs", quantity=100, rate="15.5"))
    for _ in range(40):
        action = rng.choice(["add", "remove", "reorder", "quantity", "rate", "description"])
        index = rng.randrange(len(doc.items))
        if action == "add":
            doc = add_item(doc)
        elif action == "remove":
            if len(doc.items) == 1:
                with pytest.raises(InvariantViolation):
                    remove_item(doc, index)
                continue
            doc = remove_item(doc, index)
        elif action == "reorder":
            doc = reorder(doc, index, rng.randrange(len(doc.items)))
        elif action == "description":
            doc = update_item(doc, index, "description", f"Item {rng.randint(1, 99)}")
        else:
            value = Decimal(rng.randint(0, 500000)) / Decimal(10 ** rng.randint(0, 3))
            doc = update_item(doc, index, action, value)
        assert len(doc.items) >= 1
        _check_totals(doc)
