from .menu_link_reconciler import (
    LinkResult,
    MenuLinkReconciler,
    ReconcileReport,
    menu_item_id_for,
    name_similarity,
    pos_id_for,
    resolve_menu_item_status,
)

__all__ = [
    "LinkResult",
    "MenuLinkReconciler",
    "ReconcileReport",
    "menu_item_id_for",
    "name_similarity",
    "pos_id_for",
    "resolve_menu_item_status",
]
