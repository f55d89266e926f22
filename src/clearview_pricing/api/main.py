import logging
from typing import Any, Optional

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from clearview_pricing.config.settings import get_settings
from clearview_pricing.engine import PricingError, QuoteRequest
from clearview_pricing.api.state import engine, quote_store
from clearview_pricing.services.house_type import guess_house_type

settings = get_settings()

logging.basicConfig(
    level=getattr(logging, settings.log_level, logging.INFO),
    format="%(levelname)s:%(name)s:%(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="ClearView Pricing API",
    description="Quote backend for window and exterior-cleaning services",
    version="1.0.0"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(PricingError)
async def pricing_error_handler(request, exc: PricingError):
    return JSONResponse(status_code=400, content={"error": exc.message})


# Raw values are validated by the engine so bad units map to 400, not 422
class QuoteBody(BaseModel):
    serviceId: Any = None
    units: Any = None


class SaveQuoteBody(QuoteBody):
    technicianId: str


class AddressBody(BaseModel):
    address: Optional[str] = None


@app.get("/")
async def root():
    return {"status": "online", "message": "ClearView backend is running"}


@app.get("/services")
async def list_services():
    return engine.catalog.to_records()


@app.post("/quotes")
async def create_quote(body: QuoteBody):
    try:
        quote = engine.calculate(QuoteRequest(service_id=body.serviceId, units=body.units))
        return quote.to_response_dict()
    except PricingError:
        raise
    except Exception as e:
        logger.exception("Quote calculation failed")
        raise HTTPException(status_code=500, detail=str(e))


@app.post("/quotes/save")
async def save_quote(body: SaveQuoteBody):
    if not body.technicianId.strip():
        raise HTTPException(status_code=400, detail="technicianId is required")
    try:
        quote = engine.calculate(QuoteRequest(
            service_id=body.serviceId,
            units=body.units,
            technician_id=body.technicianId,
        ))
        quote_id = quote_store.save(quote, body.technicianId)
        return quote_store.get(quote_id).to_dict()
    except PricingError:
        raise
    except Exception as e:
        logger.exception("Saving quote failed")
        raise HTTPException(status_code=500, detail=str(e))


@app.get("/technicians/{technician_id}/quotes")
async def list_technician_quotes(technician_id: str):
    return [saved.to_dict() for saved in quote_store.list_by_technician(technician_id)]


@app.post("/house-type")
async def house_type(body: AddressBody):
    return guess_house_type(body.address).to_dict()


@app.get("/system/status")
async def get_status():
    return {
        "engine_active": True,
        "services_count": len(engine.catalog),
        "tax_rate": float(engine.config.tax_rate),
        "buffer_rate": float(engine.config.buffer_rate),
        "saved_quotes": len(quote_store),
    }
