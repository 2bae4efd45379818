"""
FastAPI application for the shop backend.

Store faults are mapped to JSON error bodies here; routers build their own 404s.
"""

from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from ..core.carts import CartStore
from ..core.config import VERSION, debug_enabled, ensure_data_directory, get_cors_origins
from ..core.errors import CorruptionFault, SchemaFault, StorageFault, StoreFault, ValidationFault
from ..core.orders import OrderStore
from ..core.payments import PaymentStore
from ..core.products import ProductStore
from ..core.registry import (
    get_cart_store,
    get_order_store,
    get_payment_store,
    get_product_store,
    get_user_store,
    initialize_all,
)
from ..core.users import UserStore
from ..util.logging import logger
from . import carts, orders, payments, products, users
from .responses import error_body
from .schemas import ErrorResponse, HealthResponse


@asynccontextmanager
async def lifespan(app: FastAPI):
    ensure_data_directory()
    await initialize_all()
    logger.info(f"Shop store API {VERSION} ready")
    yield


# Initialize the FastAPI application
app = FastAPI(
    title="Shop Store API",
    version=VERSION,
    description="Mock e-commerce backend over JSON document storage",
    docs_url="/docs" if debug_enabled() else None,
    redoc_url="/redoc" if debug_enabled() else None,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    401: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}

app.include_router(users.router, prefix="/users", tags=["users"], responses=ERROR_RESPONSES)
app.include_router(orders.router, prefix="/orders", tags=["orders"], responses=ERROR_RESPONSES)
app.include_router(carts.router, prefix="/carts", tags=["carts"], responses=ERROR_RESPONSES)
app.include_router(products.router, prefix="/products", tags=["products"], responses=ERROR_RESPONSES)
app.include_router(payments.router, prefix="/payments", tags=["payments"], responses=ERROR_RESPONSES)


@app.get("/health", response_model=HealthResponse)
async def health_check_endpoint(
    user_store: UserStore = Depends(get_user_store),
    order_store: OrderStore = Depends(get_order_store),
    cart_store: CartStore = Depends(get_cart_store),
    product_store: ProductStore = Depends(get_product_store),
    payment_store: PaymentStore = Depends(get_payment_store),
):
    """Record count of every document."""
    documents = {}
    for store in (user_store, order_store, cart_store, product_store, payment_store):
        documents[store.collection] = await store.count()

    return HealthResponse(status="healthy", version=VERSION, documents=documents)


@app.exception_handler(ValidationFault)
async def validation_fault_handler(request, exc: ValidationFault):
    return JSONResponse(
        status_code=400,
        content=error_body(str(exc), "VALIDATION_ERROR", exc.field),
    )


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request, exc: RequestValidationError):
    """Malformed request bodies and parameters use the same shape as store faults."""
    errors = exc.errors()
    first = errors[0] if errors else {}
    location = [str(part) for part in first.get("loc", ()) if part not in ("body", "query", "path")]
    field = ".".join(location) or None
    message = f"{field}: {first.get('msg')}" if field else first.get("msg", "Invalid request")
    return JSONResponse(
        status_code=400,
        content=error_body(message, "VALIDATION_ERROR", field),
    )


@app.exception_handler(SchemaFault)
@app.exception_handler(CorruptionFault)
@app.exception_handler(StorageFault)
async def database_fault_handler(request, exc: StoreFault):
    logger.log_operation("api.request", "error", {
        "path": request.url.path,
        "fault": type(exc).__name__,
        "message": str(exc),
    })
    return JSONResponse(status_code=500, content=error_body(str(exc), "DATABASE_ERROR"))


@app.exception_handler(Exception)
async def global_exception_handler(request, exc):
    """Handle all unhandled exceptions."""
    logger.error(f"Unhandled exception: {exc}")
    content = error_body("Internal server error", "SERVER_ERROR")
    if debug_enabled():
        content["debug"] = str(exc)
    return JSONResponse(status_code=500, content=content)
