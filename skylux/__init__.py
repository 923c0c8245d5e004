"""
SkyLux Airlines booking core.

In-memory flight catalog, seat inventory, fare engine, promotion ledger and
booking orchestrator, served over a FastAPI app in ``skylux.main``.
"""

__version__ = "1.0.0"
