from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from starlette.responses import Response

from storefront.core.config import settings
from storefront.routers import coupons, customers, invoices, items, merchants

OPENAPI_TAGS = [
    {"name": "Merchants", "description": "Create, read, update, and delete merchants."},
    {"name": "Items", "description": "Manage the items merchants sell."},
    {"name": "Customers", "description": "Create and look up customers."},
    {"name": "Invoices", "description": "Create invoices and compute their totals."},
    {"name": "Coupons", "description": "Create, activate, and deactivate merchant coupons."},
]

app = FastAPI(
    title=settings.APP_NAME,
    version=settings.version,
    description=(
        "A small e-commerce API. "
        "Manage merchants, items, customers, invoices, and discount coupons."
    ),
    openapi_tags=OPENAPI_TAGS,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        o.strip() for o in settings.CORS_ORIGINS.split(",") if o.strip()
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def options_handler(request: Request, call_next):  # type: ignore[no-untyped-def]
    if request.method == "OPTIONS":
        origin = request.headers.get("origin", "*")
        return Response(
            status_code=200,
            headers={
                "Access-Control-Allow-Origin": origin,
                "Access-Control-Allow-Methods": "*",
                "Access-Control-Allow-Headers": "*",
                "Access-Control-Allow-Credentials": "true",
                "Access-Control-Max-Age": "86400",
            },
        )
    return await call_next(request)


app.include_router(merchants.router, prefix="/api/v1", tags=["Merchants"])
app.include_router(items.router, prefix="/api/v1", tags=["Items"])
app.include_router(customers.router, prefix="/api/v1", tags=["Customers"])
app.include_router(invoices.router, prefix="/api/v1", tags=["Invoices"])
app.include_router(coupons.router, prefix="/api/v1", tags=["Coupons"])


@app.get("/")
async def root() -> dict[str, str]:
    return {
        "app": settings.APP_NAME,
        "version": settings.version,
        "status": "running",
    }
