import requests

from medicamp.constant_file import STRIPE_API_URL, STRIPE_SECRET_KEY, UPSTREAM_TIMEOUT
from medicamp.upstream import UpstreamError, call_upstream

SERVICE = "payment processor"


def _post_payment_intent(amount: int, currency: str):
    if not STRIPE_SECRET_KEY:
        raise UpstreamError(SERVICE, "STRIPE_SECRET_KEY is not set")
    r = requests.post(
        STRIPE_API_URL,
        data={"amount": amount, "currency": currency, "payment_method_types[]": "card"},
        auth=(STRIPE_SECRET_KEY, ""),
        timeout=UPSTREAM_TIMEOUT,
    )
    if r.status_code >= 400:
        raise UpstreamError(SERVICE, r.text, r.status_code)
    return r.json()


# ------------------ Create payment intent ------------------
async def create_payment_intent(price: float, currency: str = "usd"):
    # processor amounts are in the smallest currency unit
    amount = int(round(price * 100))
    intent = await call_upstream(SERVICE, _post_payment_intent, amount, currency)
    return {"clientSecret": intent["client_secret"]}
