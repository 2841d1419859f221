"""HTTP contract of the form endpoints."""

from fastapi.testclient import TestClient

from billpay.common.errors import UpstreamError
from billpay.services.api.main import create_app


def test_config_exposes_only_publishable_key(client):
    response = client.get("/api/config")

    assert response.status_code == 200
    assert response.json() == {"stripePublishableKey": "pk_test_123"}


def test_config_without_stripe_is_null(disabled_settings, relay):
    client = TestClient(create_app(disabled_settings, relay=relay))

    assert client.get("/api/config").json() == {"stripePublishableKey": None}


def test_create_payment_intent_returns_client_secret(client, gateway):
    response = client.post("/api/create-payment-intent", json={"amount": 125.5})

    assert response.status_code == 200
    assert response.json() == {"clientSecret": "pi_test_1_secret_abc"}
    assert gateway.created == [(12550, "usd")]


def test_create_payment_intent_rejects_small_amount(client, gateway):
    response = client.post("/api/create-payment-intent", json={"amount": 0.49})

    assert response.status_code == 400
    assert response.json() == {"success": False, "message": "Invalid amount. Minimum is $0.50."}
    assert gateway.created == []


def test_create_payment_intent_rejects_non_numeric_amount(client):
    response = client.post("/api/create-payment-intent", json={"amount": "lots"})

    assert response.status_code == 400
    assert response.json()["message"] == "Invalid amount. Minimum is $0.50."


def test_create_payment_intent_without_body_is_invalid_amount(client):
    assert client.post("/api/create-payment-intent").status_code == 400


def test_create_payment_intent_disabled_is_503(disabled_settings, relay):
    client = TestClient(create_app(disabled_settings, relay=relay))

    response = client.post("/api/create-payment-intent", json={"amount": 10})

    assert response.status_code == 503
    assert response.json()["success"] is False


def test_create_payment_intent_processor_error_hides_detail(client, gateway):
    gateway.create_error = UpstreamError("stripe", "Invalid API Key provided: sk_test_***123")

    response = client.post("/api/create-payment-intent", json={"amount": 10})

    assert response.status_code == 500
    assert response.json() == {"success": False, "message": "Failed to create payment session."}


def test_submit_bill_success_sends_two_emails(client, gateway, relay, bill_payload):
    gateway.statuses["pi_paid"] = "succeeded"

    response = client.post("/api/submit-bill", json=bill_payload)

    assert response.status_code == 200
    assert response.json() == {
        "success": True,
        "message": "Submission sent. Check your email for a receipt.",
    }
    assert [m.to for m in relay.delivered] == ["office@example.com", "jane@example.com"]


def test_submit_bill_missing_fields(client, relay, bill_payload):
    bill_payload["city"] = "   "
    del bill_payload["receiptEmail"]

    response = client.post("/api/submit-bill", json=bill_payload)

    assert response.status_code == 400
    assert response.json()["message"] == "Missing required fields: city, receiptEmail."
    assert relay.attempted == []


def test_submit_bill_without_payment_reference(client, relay, bill_payload):
    del bill_payload["paymentIntentId"]

    response = client.post("/api/submit-bill", json=bill_payload)

    assert response.status_code == 400
    assert response.json()["message"].startswith("Payment is required.")
    assert relay.attempted == []


def test_submit_bill_ignores_client_payment_claim(client, gateway, relay, bill_payload):
    gateway.statuses["pi_paid"] = "requires_payment_method"
    bill_payload["paymentStatus"] = "succeeded"

    response = client.post("/api/submit-bill", json=bill_payload)

    assert response.status_code == 400
    assert response.json()["message"].startswith("Payment was not completed.")
    assert relay.attempted == []


def test_submit_bill_unknown_reference_is_invalid(client, relay, bill_payload):
    bill_payload["paymentIntentId"] = "pi_forged"

    response = client.post("/api/submit-bill", json=bill_payload)

    assert response.status_code == 400
    assert response.json()["message"].startswith("Invalid payment.")


def test_submit_bill_receipt_failure_says_card_charged_once(client, gateway, relay, bill_payload):
    gateway.statuses["pi_paid"] = "succeeded"
    relay.fail_for.add("jane@example.com")

    response = client.post("/api/submit-bill", json=bill_payload)

    assert response.status_code == 500
    body = response.json()
    assert body["success"] is False
    assert "will not be charged again" in body["message"]
    assert "550" not in body["message"]


def test_submit_bill_escapes_html_in_emails(client, gateway, relay, bill_payload):
    gateway.statuses["pi_paid"] = "succeeded"
    bill_payload["customerName"] = "<script>x</script>"

    client.post("/api/submit-bill", json=bill_payload)

    operator, customer = relay.delivered
    for message in (operator, customer):
        assert "&lt;script&gt;x&lt;/script&gt;" in message.html
        assert "<script>x</script>" in message.text


def test_new_customer_requires_name_and_email(client, relay):
    response = client.post("/api/submit-new-customer", json={"name": "Sam"})

    assert response.status_code == 400
    assert response.json() == {"success": False, "message": "Please enter your name and email."}
    assert relay.attempted == []


def test_new_customer_notifies_operator_only(client, relay):
    response = client.post(
        "/api/submit-new-customer",
        json={"name": "Sam", "email": "sam@example.com", "zip": "71901", "notes": "Gate code 42"},
    )

    assert response.status_code == 200
    assert response.json()["success"] is True
    (message,) = relay.delivered
    assert message.to == "office@example.com"
    assert "ZIP: 71901" in message.text
    assert "Notes: Gate code 42" in message.text
    assert "Company: —" in message.text


def test_new_customer_send_failure_is_500(client, relay):
    relay.unavailable = True

    response = client.post("/api/submit-new-customer", json={"name": "Sam", "email": "sam@example.com"})

    assert response.status_code == 500
    assert response.json()["success"] is False


def test_health_metrics_and_static_pages(client):
    assert client.get("/health").json() == {"ok": True}
    assert "submissions_total" in client.get("/metrics").text
    page = client.get("/bill-pay.html")
    assert page.status_code == 200
    assert "card-element" in page.text
    assert client.get("/").status_code == 200


def test_submit_bill_blank_amount_is_a_missing_field(client, relay, bill_payload):
    for blank in ("", "   "):
        bill_payload["amount"] = blank

        response = client.post("/api/submit-bill", json=bill_payload)

        assert response.status_code == 400
        assert response.json()["message"] == "Missing required fields: amount."
    assert relay.attempted == []


def test_submit_bill_blank_amount_reported_with_other_blank_fields(client, bill_payload):
    bill_payload["customerName"] = ""
    bill_payload["amount"] = ""

    response = client.post("/api/submit-bill", json=bill_payload)

    assert response.status_code == 400
    assert response.json()["message"] == "Missing required fields: customerName, amount."
