import unittest
from decimal import Decimal

from app.invoicing.domain.entities.invoice_form import (
    FIELD_MESSAGES,
    InvoiceFormState,
    parse_invoice_form,
)

_VALID_FORM = {"customerId": "c1", "amount": "80", "status": "pending"}


class TestInvoiceForm(unittest.TestCase):
    def test_valid_form_is_parsed(self) -> None:
        result = parse_invoice_form(_VALID_FORM)

        self.assertTrue(result.success)
        self.assertEqual(result.field_errors, {})
        self.assertEqual(result.data.customer_id, "c1")
        self.assertEqual(result.data.amount, Decimal("80"))
        self.assertEqual(result.data.status, "pending")
        self.assertEqual(result.data.amount_in_cents, 8000)

    def test_amount_in_cents_is_rounded_to_integer(self) -> None:
        result = parse_invoice_form({**_VALID_FORM, "amount": "19.99"})

        self.assertEqual(result.data.amount_in_cents, 1999)
        self.assertIsInstance(result.data.amount_in_cents, int)

    def test_non_positive_or_unreadable_amount_is_rejected(self) -> None:
        for amount in ("0", "-5", "", "abc", None, "NaN"):
            with self.subTest(amount=amount):
                result = parse_invoice_form({**_VALID_FORM, "amount": amount})

                self.assertFalse(result.success)
                self.assertEqual(
                    result.field_errors,
                    {"amount": ["Please enter an amount greater than $0."]},
                )

    def test_amount_below_one_cent_is_rejected(self) -> None:
        for amount in ("0.004", "0.0001", "1e-999999"):
            with self.subTest(amount=amount):
                result = parse_invoice_form({**_VALID_FORM, "amount": amount})

                self.assertIsNone(result.data)
                self.assertEqual(
                    result.field_errors,
                    {"amount": ["Please enter an amount greater than $0."]},
                )

    def test_half_cent_rounds_up_to_one_cent(self) -> None:
        result = parse_invoice_form({**_VALID_FORM, "amount": "0.005"})

        self.assertEqual(result.data.amount_in_cents, 1)

    def test_amount_beyond_the_stored_range_is_rejected(self) -> None:
        for amount in ("1e999999", "21474836.48", "99999999999"):
            with self.subTest(amount=amount):
                result = parse_invoice_form({**_VALID_FORM, "amount": amount})

                self.assertIsNone(result.data)
                self.assertEqual(
                    result.field_errors,
                    {"amount": ["Please enter an amount greater than $0."]},
                )

    def test_largest_storable_amount_is_accepted(self) -> None:
        result = parse_invoice_form({**_VALID_FORM, "amount": "21474836.47"})

        self.assertEqual(result.data.amount_in_cents, 2_147_483_647)

    def test_missing_customer_is_rejected(self) -> None:
        for form in (
            {"amount": "80", "status": "paid"},
            {**_VALID_FORM, "customerId": ""},
            {**_VALID_FORM, "customerId": None},
        ):
            with self.subTest(form=form):
                result = parse_invoice_form(form)

                self.assertEqual(result.field_errors, {"customerId": ["Please select a customer."]})

    def test_unknown_status_is_rejected(self) -> None:
        for status in ("overdue", "", None, "PAID"):
            with self.subTest(status=status):
                result = parse_invoice_form({**_VALID_FORM, "status": status})

                self.assertEqual(
                    result.field_errors, {"status": ["Please select an invoice status."]}
                )

    def test_empty_form_reports_every_field_once(self) -> None:
        result = parse_invoice_form({})

        self.assertEqual(
            result.field_errors,
            {name: [message] for name, message in FIELD_MESSAGES.items()},
        )

    def test_unrelated_fields_are_ignored(self) -> None:
        result = parse_invoice_form({**_VALID_FORM, "date": "1999-01-01", "id": "x"})

        self.assertTrue(result.success)

    def test_state_payload_omits_empty_errors(self) -> None:
        state = InvoiceFormState(message="Database Error: Failed to Create Invoice.")

        self.assertEqual(state.to_dict(), {"message": "Database Error: Failed to Create Invoice."})

    def test_state_payload_carries_field_errors(self) -> None:
        state = InvoiceFormState(
            message="Missing Fields. Failed to Create Invoice.",
            errors={"amount": ["Please enter an amount greater than $0."]},
        )

        self.assertEqual(
            state.to_dict(),
            {
                "message": "Missing Fields. Failed to Create Invoice.",
                "errors": {"amount": ["Please enter an amount greater than $0."]},
            },
        )


if __name__ == "__main__":
    unittest.main()
