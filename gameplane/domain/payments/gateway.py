"""Dodo Payments service - Checkout sessions for court slot payments"""

import logging
from typing import Optional

from dodopayments import AsyncDodoPayments  # type: ignore

logger = logging.getLogger(__name__)


class PaymentGatewayError(Exception):
    """The payment processor could not create the checkout"""


def normalize_dodo_environment(env: Optional[str]) -> str:
    """Normalize Dodo environment value to expected format"""
    value = (env or "test_mode").strip().lower()
    if value in {"live", "production", "prod"}:
        return "live_mode"
    if value in {"test", "sandbox", "staging", "dev", "development"}:
        return "test_mode"
    if value in {"test_mode", "live_mode"}:
        return value
    logger.warning(f"Unknown DODO environment '{env}', defaulting to test_mode")
    return "test_mode"


class DodoPaymentsService:
    """Service for Dodo Payments API operations"""

    def __init__(
        self,
        api_key: Optional[str] = None,
        environment: Optional[str] = None,
        product_id: Optional[str] = None,
        return_url: Optional[str] = None,
    ):
        self.api_key = api_key
        self.environment = normalize_dodo_environment(environment)
        self.product_id = product_id
        self.return_url = return_url
        self.client = None

        if not self.api_key:
            logger.warning(
                "DODO_PAYMENTS_API_KEY not set; payment endpoints will fail until configured"
            )
        else:
            try:
                self.client = AsyncDodoPayments(
                    bearer_token=self.api_key,
                    environment=self.environment,
                )
                logger.info(f"Dodo Payments client initialized (env={self.environment})")
            except Exception as e:
                logger.error(f"Failed to initialize Dodo client (env={self.environment}): {e}")
                self.client = None

    def is_available(self) -> bool:
        """Check if Dodo Payments client is available"""
        return self.client is not None and bool(self.product_id)

    async def create_payment_intent(
        self,
        amount: float,
        customer_email: Optional[str] = None,
        metadata: Optional[dict] = None,
    ) -> dict:
        """
        Start a checkout for ``amount`` using the pay-what-you-want product.
        The session id is what the front-end hands to the payment widget.
        """
        if not self.is_available():
            raise PaymentGatewayError("Dodo Payments client not initialized")

        session_data = {
            "product_cart": [
                {
                    "product_id": self.product_id,
                    "quantity": 1,
                    # Dynamic amount in lowest currency unit (e.g., cents)
                    "amount": int(round(amount * 100)),
                }
            ],
            "customer": {"email": customer_email or ""},
            "metadata": {k: str(v) for k, v in (metadata or {}).items()},
        }
        if self.return_url:
            session_data["return_url"] = self.return_url

        try:
            session = await self.client.checkout_sessions.create(**session_data)
        except Exception as e:
            logger.error(f"Failed to create checkout session: {e}")
            raise PaymentGatewayError(str(e)) from e

        checkout_url = getattr(session, "checkout_url", None)
        session_id = getattr(session, "session_id", None)
        if not session_id:
            raise PaymentGatewayError("Checkout session missing session_id")

        return {"clientSecret": session_id, "checkoutUrl": checkout_url, "amount": amount}
