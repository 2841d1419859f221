"""Form submission endpoints consumed by the browser scripts."""

from fastapi import APIRouter, Depends, Request

from billpay.services.intake.schemas import NewCustomerSubmission
from billpay.services.intake.service import NewCustomerHandler
from billpay.services.orchestrator.schemas import (
    BillSubmission,
    ConfigResponse,
    PaymentIntentRequest,
    PaymentIntentResponse,
    SubmissionResponse,
)
from billpay.services.orchestrator.service import SubmissionOrchestrator

router = APIRouter(prefix="/api")


def get_orchestrator(request: Request) -> SubmissionOrchestrator:
    return request.app.state.orchestrator


def get_intake(request: Request) -> NewCustomerHandler:
    return request.app.state.intake


@router.get("/config", response_model=ConfigResponse)
def get_config(request: Request):
    """Publishable key for Stripe.js; null disables the card form."""

    return ConfigResponse(stripe_publishable_key=request.app.state.settings.stripe_publishable_key)


@router.post("/create-payment-intent", response_model=PaymentIntentResponse)
async def create_payment_intent(
    req: PaymentIntentRequest | None = None,
    orchestrator: SubmissionOrchestrator = Depends(get_orchestrator),
):
    """Open a PaymentIntent so the browser can confirm the card."""

    session = await orchestrator.create_payment_session(req.amount if req else None)
    return PaymentIntentResponse(client_secret=session.client_secret)


@router.post("/submit-bill", response_model=SubmissionResponse)
async def submit_bill(
    req: BillSubmission | None = None,
    orchestrator: SubmissionOrchestrator = Depends(get_orchestrator),
):
    """Verify the payment with the processor, then email operator and customer."""

    message = await orchestrator.submit_bill(req or BillSubmission())
    return SubmissionResponse(success=True, message=message)


@router.post("/submit-new-customer", response_model=SubmissionResponse)
async def submit_new_customer(
    req: NewCustomerSubmission | None = None,
    intake: NewCustomerHandler = Depends(get_intake),
):
    message = await intake.submit(req or NewCustomerSubmission())
    return SubmissionResponse(success=True, message=message)
