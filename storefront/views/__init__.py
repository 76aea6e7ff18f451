"""Surface rendering and view synchronization."""

from storefront.views.render import DeliveryConfig, RowView, SurfaceView, render_surface
from storefront.views.surfaces import CHECKOUT, MODAL, PAGE, SURFACES, SurfaceDescriptor
from storefront.views.sync import ViewSynchronizer

__all__ = [
    "CHECKOUT",
    "DeliveryConfig",
    "MODAL",
    "PAGE",
    "RowView",
    "SURFACES",
    "SurfaceDescriptor",
    "SurfaceView",
    "ViewSynchronizer",
    "render_surface",
]
