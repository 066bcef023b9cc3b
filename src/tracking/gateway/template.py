"""Shipping progress template — sent when a tracked order reaches a new shipping stage."""


class ShippingProgressTemplate:
    @staticmethod
    def render(context: dict) -> dict:
        tracked_order_id = context.get("tracked_order_id", "N/A")
        status = context.get("status", "next")
        estimated_delivery = context.get("estimated_delivery", "soon")
        return {
            "subject": "Order Shipping Update",
            "subtitle": f"New info on order: {tracked_order_id} is available.",
            "body": (
                f"Your order: {tracked_order_id} has reached the {status} stage. "
                f"Estimated delivery is on {estimated_delivery}."
            ),
        }
