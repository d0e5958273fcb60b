from sqlassist.policy.pii_redactor import CARD_MASK, PHONE_MASK, mask_row, mask_rows, mask_value


def test_mask_row_email_and_idempotent():
    row = {"email": "a.b@x.com", "note": "call ***-PHONE-***"}
    once = mask_row(row)
    assert once == {"email": "a***@***", "note": "call ***-PHONE-***"}
    assert mask_row(once) == once


def test_email_with_digits_is_masked_before_digit_rules():
    assert mask_value("john5551234567@mail.com") == "j***@***"


def test_phone_masked():
    assert mask_value("call +1 415-555-0134 today") == f"call {PHONE_MASK} today"


def test_card_masked():
    assert mask_value("card: 4111  1111  1111  1111") == f"card: {CARD_MASK}"


def test_non_strings_pass_through():
    row = {"id": 5, "amount": 12.5, "missing": None, "flag": True}
    assert mask_row(row) == row


def test_mask_row_does_not_mutate_input():
    row = {"email": "bob@example.org"}
    mask_row(row)
    assert row == {"email": "bob@example.org"}


def test_mask_rows_shapes():
    assert mask_rows({"rowcount": 1}) == {"rowcount": 1}
    assert mask_rows(None) is None
    assert mask_rows([("x@y.io", 1)]) == [["x***@***", 1]]
    assert mask_rows([{"c": "q@w.com"}, "z@z.com"]) == [{"c": "q***@***"}, "z***@***"]
