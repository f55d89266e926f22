"""
Process-wide collaborators shared by the API routes.
"""
from clearview_pricing.engine import PricingEngine
from clearview_pricing.services.quote_store import InMemoryQuoteStore

engine = PricingEngine()
quote_store = InMemoryQuoteStore()
