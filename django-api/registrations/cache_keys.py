"""Cache key helpers shared by handlers and signal receivers."""


def line_items_key(event_id) -> str:
    return f"events:{event_id}:line_items"
