"""Checkout page and the endpoints the payment widget reports back to."""
from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse

from storefront.api.common import (
    CheckoutCompleteIn,
    CheckoutResponse,
    CheckoutStartIn,
    get_client_id,
    open_store,
    open_synchronizer,
)
from storefront.api.routes_cart import render_page
from storefront.checkout.bridge import CheckoutBridge, CustomerForm, WidgetConfig
from storefront.views.html import templates

router = APIRouter()


class DeferredWidget:
    """Holds the widget config so the browser can open the real widget."""

    def __init__(self) -> None:
        self.config: WidgetConfig | None = None

    def open(self, config: WidgetConfig) -> None:
        self.config = config


class CollectingNotifier:
    def __init__(self) -> None:
        self.messages: list[str] = []

    def alert(self, message: str) -> None:
        self.messages.append(message)


class RedirectNavigator:
    def __init__(self) -> None:
        self.url: str | None = None

    def go(self, url: str) -> None:
        self.url = url


def _bridge(request: Request, client_id: str):
    widget, notifier, navigator = DeferredWidget(), CollectingNotifier(), RedirectNavigator()
    bridge = CheckoutBridge(
        store=open_store(request, client_id),
        settings=request.app.state.settings,
        widget=widget,
        verifier=request.app.state.checkout_verifier,
        notifier=notifier,
        navigator=navigator,
    )
    return bridge, widget, notifier, navigator


@router.get("/checkout", response_class=HTMLResponse)
def checkout_page(request: Request, client_id: str = Depends(get_client_id)):
    store = open_store(request, client_id)
    with open_synchronizer(store, request.app.state.settings) as sync:
        return render_page(request, "checkout", sync, client_id)


@router.post("/checkout/start", response_model=CheckoutResponse)
def checkout_start(
    payload: CheckoutStartIn, request: Request, client_id: str = Depends(get_client_id)
):
    bridge, widget, notifier, _ = _bridge(request, client_id)
    bridge.start(CustomerForm.from_dict(payload.model_dump()))
    return CheckoutResponse(
        widget=widget.config.to_dict() if widget.config else None,
        notices=notifier.messages,
    )


@router.post("/checkout/complete", response_model=CheckoutResponse)
async def checkout_complete(
    payload: CheckoutCompleteIn, request: Request, client_id: str = Depends(get_client_id)
):
    bridge, _, notifier, navigator = _bridge(request, client_id)
    outcome = await bridge.complete(payload.reference)
    return CheckoutResponse(notices=notifier.messages, redirect=navigator.url, outcome=outcome.value)


@router.post("/checkout/close", response_model=CheckoutResponse)
def checkout_close(request: Request, client_id: str = Depends(get_client_id)):
    bridge, _, notifier, _ = _bridge(request, client_id)
    outcome = bridge.close()
    return CheckoutResponse(notices=notifier.messages, outcome=outcome.value)


@router.get("/thank-you", response_class=HTMLResponse)
def thank_you(request: Request, client_id: str = Depends(get_client_id)):
    store = open_store(request, client_id)
    return templates.TemplateResponse(request, "thank_you.html", {"badge_count": store.count()})
