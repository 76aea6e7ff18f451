"""Storefront pages and cart routes (HTML surfaces plus a JSON API)."""
from __future__ import annotations

from typing import Any

import anyio
from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from starlette.datastructures import FormData

from storefront.api.common import (
    CartActionIn,
    CartResponse,
    LineItemIn,
    delivery_for,
    get_client_id,
    logger,
    open_store,
    open_synchronizer,
    remember_client,
    surfaces_out,
)
from storefront.core.config import Settings
from storefront.core.exceptions import ValidationException
from storefront.views.html import render_surface_html, templates
from storefront.views.surfaces import SURFACES

router = APIRouter()

# Demo catalog; in a real deployment this markup comes from the shop's CMS.
PRODUCTS: list[dict[str, Any]] = [
    {"id": "p-100", "name": "Ankara Tote Bag", "price": 4500},
    {"id": "p-101", "name": "Shea Butter (250g)", "price": 2500},
    {"id": "p-102", "name": "Adire Scarf", "price": 7800},
    {"id": "p-103", "name": "Zobo Drink Pack", "price": 1200},
]

SURFACE_PAGES = {"modal": "index.html", "page": "cart.html", "checkout": "checkout.html"}


def _settings(request: Request) -> Settings:
    return request.app.state.settings


def render_page(
    request: Request, surface: str, sync, client_id: str, **extra: Any
) -> HTMLResponse:
    view = sync.view(surface)
    settings = _settings(request)
    context = {
        "view": view,
        "surface_html": render_surface_html(view),
        "badge_count": sync.badge_count(),
        "currency_symbol": settings.currency_symbol,
        "products": PRODUCTS,
    }
    context.update(extra)
    response = templates.TemplateResponse(request, SURFACE_PAGES[surface], context)
    remember_client(response, client_id)
    return response


# ---------------- pages ----------------


@router.get("/", response_class=HTMLResponse)
def index(request: Request, client_id: str = Depends(get_client_id)):
    store = open_store(request, client_id)
    with open_synchronizer(store, _settings(request)) as sync:
        open_modal = request.query_params.get("cart") == "open"
        return render_page(request, "modal", sync, client_id, open_modal=open_modal)


@router.get("/cart", response_class=HTMLResponse)
def cart_page(request: Request, client_id: str = Depends(get_client_id)):
    store = open_store(request, client_id)
    with open_synchronizer(store, _settings(request)) as sync:
        return render_page(request, "page", sync, client_id)


@router.post("/cart/add")
async def add_to_cart(request: Request, client_id: str = Depends(get_client_id)):
    form = await request.form()
    item = {"id": form.get("id"), "name": form.get("name"), "price": form.get("price")}
    try:
        # storage may be Redis; keep blocking calls off the event loop
        await anyio.to_thread.run_sync(lambda: open_store(request, client_id).add(item))
    except ValidationException as e:
        raise HTTPException(status_code=400, detail=e.message) from e
    response = RedirectResponse("/?cart=open", status_code=303)
    remember_client(response, client_id)
    return response


@router.post("/cart/actions", response_class=HTMLResponse)
async def cart_action(request: Request, client_id: str = Depends(get_client_id)):
    """Every control of a surface posts here; ``op`` is ``action[:index]``."""
    form = await request.form()
    surface = str(form.get("surface") or "page")
    if surface not in SURFACES or surface == "checkout":
        raise HTTPException(status_code=400, detail=f"Unknown surface: {surface}")
    return await anyio.to_thread.run_sync(
        lambda: _apply_cart_action(request, client_id, surface, form)
    )


def _apply_cart_action(
    request: Request, client_id: str, surface: str, form: FormData
) -> HTMLResponse:
    op = str(form.get("op") or "")
    action, _, arg = op.partition(":")
    settings = _settings(request)
    delivery = delivery_for(
        settings, surface, enabled=form.get("apply_delivery"), fee=form.get("delivery_fee")
    )
    store = open_store(request, client_id)
    with open_synchronizer(store, settings, {surface: delivery}) as sync:
        try:
            sync.dispatch(
                surface,
                action,
                index=arg or None,
                value=form.get(f"qty-{arg}") if action == "set_qty" else arg or None,
                selected=form.getlist("selected"),
                delivery_enabled=form.get("apply_delivery"),
                delivery_fee=form.get("delivery_fee"),
            )
        except ValidationException as e:
            logger.info("Rejected cart action %r on %s: %s", op, surface, e.message)
            raise HTTPException(status_code=400, detail=e.message) from e
        return render_page(request, surface, sync, client_id, open_modal=surface == "modal")


# ---------------- JSON API ----------------


@router.get("/api/v1/cart", response_model=CartResponse)
def get_cart(request: Request, client_id: str = Depends(get_client_id)):
    store = open_store(request, client_id)
    with open_synchronizer(store, _settings(request)) as sync:
        return CartResponse(
            items=[item.to_dict() for item in store.items()],
            count=store.count(),
            surfaces=surfaces_out(sync),
        )


@router.post("/api/v1/cart/items", response_model=CartResponse)
def api_add_item(
    payload: LineItemIn, request: Request, client_id: str = Depends(get_client_id)
):
    store = open_store(request, client_id)
    with open_synchronizer(store, _settings(request)) as sync:
        try:
            store.add(payload.model_dump())
        except ValidationException as e:
            raise HTTPException(status_code=400, detail=e.message) from e
        return CartResponse(
            items=[item.to_dict() for item in store.items()],
            count=store.count(),
            surfaces=surfaces_out(sync),
        )


@router.post("/api/v1/cart/actions", response_model=CartResponse)
def api_cart_action(
    payload: CartActionIn, request: Request, client_id: str = Depends(get_client_id)
):
    if payload.surface not in SURFACES:
        raise HTTPException(status_code=400, detail=f"Unknown surface: {payload.surface}")
    settings = _settings(request)
    delivery = delivery_for(
        settings, payload.surface, enabled=payload.apply_delivery, fee=payload.delivery_fee
    )
    store = open_store(request, client_id)
    with open_synchronizer(store, settings, {payload.surface: delivery}) as sync:
        try:
            sync.dispatch(
                payload.surface,
                payload.action,
                index=payload.index,
                value=payload.value,
                selected=payload.selected,
                delivery_enabled=payload.apply_delivery,
                delivery_fee=payload.delivery_fee,
            )
        except ValidationException as e:
            raise HTTPException(status_code=400, detail=e.message) from e
        surfaces = surfaces_out(sync)
        return CartResponse(
            items=[item.to_dict() for item in store.items()],
            count=store.count(),
            surfaces=surfaces,
        )

