from app.demo.seed import DEMO_STATUS_COUNTS, seed_orders

__all__ = ["DEMO_STATUS_COUNTS", "seed_orders"]
