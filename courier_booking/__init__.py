"""Courier portal booking automation with order-store status reporting."""
