from prometheus_client import Counter, Histogram


# Order Metrics
orders_placed_total = Counter("marketplace_orders_placed_total", "Total orders placed", ["status"])
order_value = Histogram(
    "marketplace_order_value",
    "Order value distribution",
    buckets=[10, 50, 100, 200, 500, 1000, 2000, 5000, float("inf")],
)
order_status_transitions_total = Counter(
    "marketplace_order_status_transitions_total", "Order status transitions", ["from_status", "to_status"]
)
order_cancellations_total = Counter("marketplace_order_cancellations_total", "Orders cancelled", ["actor"])

# Stock Metrics
stock_reservation_failures = Counter("marketplace_stock_reservation_failure", "Stock reservation failures")

# Notification Metrics
notification_emit_failures = Counter(
    "marketplace_notification_emit_failures_total", "Notifications that could not be stored", ["type"]
)

# Moderation Metrics
product_moderation_total = Counter("marketplace_product_moderation_total", "Product moderation decisions", ["decision"])

# Review Metrics
review_actions_total = Counter("marketplace_review_actions_total", "Review writes and helpful votes", ["action"])
