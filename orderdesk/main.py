"""
FastAPI Application Entry Point

Order Desk - restaurant order management backend.

Endpoints:
    - POST /api/payments/create-order: Create a gateway order
    - POST /api/payments/verify-and-create-order: Verify payment, store order
    - GET /api/orders: Orders of a day
    - PATCH /api/orders/{id}/status: Move an order through its lifecycle
    - GET /api/dashboard/sales: Revenue for a day/week/month
    - GET /api/dashboard/topdish: Best-selling dish of a day
    - POST /api/manager/login: Manager login
    - POST /api/manager/change-credentials: Manager credential rotation
    - POST /update-menu: Publish the menu file
    - WS /ws: Live order events for staff displays
    - GET /health: System health check
"""

import logging
from contextlib import asynccontextmanager
from datetime import date, datetime
from pathlib import Path
from typing import Any, Optional

from fastapi import Body, Depends, FastAPI, HTTPException, Query, Request, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from orderdesk.core.config import get_settings, setup_logging
from orderdesk.database import engine, get_db, init_db
from orderdesk.exceptions import (
    InvalidStatusTransition,
    MenuPublishError,
    OrderNotFound,
    PaymentGatewayError,
)
from orderdesk.schemas import (
    ChangeCredentialsRequest,
    CreatePaymentOrderRequest,
    ErrorResponse,
    HealthResponse,
    ManagerLoginRequest,
    ManagerLoginResponse,
    OrderResponse,
    SalesSummary,
    StatusUpdateRequest,
    SuccessResponse,
    TopDish,
    VerifyOrderRequest,
    VerifyOrderResponse,
)
from orderdesk.services.broadcast import Broadcaster
from orderdesk.services.managers import ManagerAuthService
from orderdesk.services.menu import MenuPublisher
from orderdesk.services.orders import OrderService
from orderdesk.services.payment import BasePaymentGateway, get_payment_gateway
from orderdesk.services.reporting import ReportingService

# Initialize configuration and logging
settings = get_settings()
setup_logging()
logger = logging.getLogger(__name__)


# =============================================================================
# APPLICATION LIFECYCLE
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application startup and shutdown events.
    """
    logger.info("=" * 60)
    logger.info(f"🚀 Starting {settings.app_name}")
    logger.info(f"   Version: {settings.app_version}")
    logger.info(f"   Environment: {settings.env_mode.value}")
    logger.info(f"   Debug: {settings.debug}")
    logger.info("=" * 60)

    # The real gateway cannot be built without its keys
    if settings.use_real_services:
        missing = settings.validate_production_config()
        if missing:
            logger.warning(f"⚠️ Missing production config: {missing}")
            raise RuntimeError(f"Refusing to start, missing: {', '.join(missing)}")

    await init_db()
    logger.info("✅ Database connected")

    Path(settings.public_directory).mkdir(parents=True, exist_ok=True)

    gateway = get_payment_gateway()
    logger.info(f"✅ Payment Gateway: {gateway.provider_name}")

    logger.info(f"✅ Listening on port {settings.port}")

    yield  # Application runs

    logger.info("Shutting down...")
    await gateway.aclose()
    await engine.dispose()
    logger.info("✅ Cleanup complete")


# =============================================================================
# APPLICATION INSTANCE
# =============================================================================

app = FastAPI(
    title=settings.app_name,
    description="Order intake, payment verification, live kitchen events and sales reporting.",
    version=settings.app_version,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.state.broadcaster = Broadcaster()


# =============================================================================
# DEPENDENCIES
# =============================================================================

def get_broadcaster(request: Request) -> Broadcaster:
    return request.app.state.broadcaster


def get_menu_publisher() -> MenuPublisher:
    return MenuPublisher(settings.menu_path, lock_timeout=settings.menu_lock_timeout)


def get_order_service(
    db: AsyncSession = Depends(get_db),
    gateway: BasePaymentGateway = Depends(get_payment_gateway),
    broadcaster: Broadcaster = Depends(get_broadcaster),
) -> OrderService:
    return OrderService(db, gateway, broadcaster)


def get_reporting_service(db: AsyncSession = Depends(get_db)) -> ReportingService:
    return ReportingService(db)


def get_manager_service(db: AsyncSession = Depends(get_db)) -> ManagerAuthService:
    return ManagerAuthService(db)


# =============================================================================
# HEALTH
# =============================================================================

@app.get(
    "/health",
    response_model=HealthResponse,
    tags=["Health"],
    summary="System Health Check",
)
async def health_check(
    request: Request,
    db: AsyncSession = Depends(get_db),
    gateway: BasePaymentGateway = Depends(get_payment_gateway),
) -> HealthResponse:
    """Verify the database and the payment gateway are reachable."""

    db_status = "healthy"
    try:
        await db.execute(text("SELECT 1"))
    except Exception as e:
        db_status = f"unhealthy: {str(e)}"
        logger.error(f"Database health check failed: {e}")

    gateway_status = "healthy" if await gateway.health_check() else "unhealthy"

    overall = "operational" if db_status == gateway_status == "healthy" else "degraded"

    return HealthResponse(
        status=overall,
        database=db_status,
        payment_gateway=gateway_status,
        listeners=request.app.state.broadcaster.listener_count,
        timestamp=datetime.now(),
    )


# =============================================================================
# PAYMENT ENDPOINTS
# =============================================================================

@app.post(
    "/api/payments/create-order",
    responses={500: {"model": ErrorResponse}},
    tags=["Payments"],
    summary="Create Gateway Order",
)
async def create_payment_order(
    body: CreatePaymentOrderRequest,
    service: OrderService = Depends(get_order_service),
):
    """Create the gateway order the customer will pay against."""
    try:
        return await service.create_payment_order(body.amount)
    except PaymentGatewayError as e:
        logger.error(f"Gateway order creation failed: {e}")
        return JSONResponse(
            status_code=500,
            content={"error": "Payment order creation failed"},
        )


@app.post(
    "/api/payments/verify-and-create-order",
    response_model=VerifyOrderResponse,
    response_model_exclude_unset=True,
    tags=["Payments"],
    summary="Verify Payment and Create Order",
)
async def verify_and_create_order(
    body: VerifyOrderRequest,
    service: OrderService = Depends(get_order_service),
):
    """
    Check the gateway signature and, if valid, store the order.

    A signature mismatch is reported as ``{"success": false}``, not as an
    HTTP error.
    """
    try:
        result = await service.verify_and_create_order(
            gateway_order_id=body.gateway_order_id,
            gateway_payment_id=body.gateway_payment_id,
            signature=body.signature,
            payload=body.order_payload,
        )
    except Exception as e:
        logger.exception(f"Error creating order: {e}")
        return JSONResponse(status_code=500, content={"success": False})

    if not result.success:
        return VerifyOrderResponse(success=False)

    return VerifyOrderResponse(
        success=True,
        order=OrderResponse.model_validate(result.order),
    )


# =============================================================================
# ORDER ENDPOINTS
# =============================================================================

@app.get(
    "/api/orders",
    response_model=list[OrderResponse],
    tags=["Orders"],
    summary="List Orders of a Day",
)
async def list_orders(
    day: date = Query(..., alias="date", description="YYYY-MM-DD"),
    service: OrderService = Depends(get_order_service),
) -> list[OrderResponse]:
    """Orders created on the given day, newest first."""
    orders = await service.list_orders(day)
    return [OrderResponse.model_validate(order) for order in orders]


@app.patch(
    "/api/orders/{order_id}/status",
    response_model=OrderResponse,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
    tags=["Orders"],
)
async def update_order_status(
    order_id: int,
    body: StatusUpdateRequest,
    service: OrderService = Depends(get_order_service),
) -> OrderResponse:
    """Move an order to a new status and notify the staff displays."""
    try:
        order = await service.update_status(order_id, body.status)
    except OrderNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except InvalidStatusTransition as e:
        raise HTTPException(status_code=409, detail=str(e))

    return OrderResponse.model_validate(order)


# =============================================================================
# DASHBOARD ENDPOINTS
# =============================================================================

@app.get(
    "/api/dashboard/sales",
    response_model=SalesSummary,
    tags=["Dashboard"],
)
async def sales_summary(
    day: date = Query(..., alias="date", description="YYYY-MM-DD"),
    period: Optional[str] = Query(None, description="day | week | month"),
    service: ReportingService = Depends(get_reporting_service),
) -> SalesSummary:
    """Revenue and order count, excluding deleted orders."""
    return await service.sales_summary(period, day)


@app.get(
    "/api/dashboard/topdish",
    response_model=Optional[TopDish],
    tags=["Dashboard"],
)
async def top_dish(
    day: date = Query(..., alias="date", description="YYYY-MM-DD"),
    service: ReportingService = Depends(get_reporting_service),
) -> Optional[TopDish]:
    """Best-selling dish of the day, or null when nothing was sold."""
    return await service.top_dish(day)


# =============================================================================
# MANAGER ENDPOINTS
# =============================================================================

@app.post(
    "/api/manager/login",
    response_model=ManagerLoginResponse,
    response_model_exclude_none=True,
    responses={401: {"model": ManagerLoginResponse}},
    tags=["Manager"],
)
async def manager_login(
    body: ManagerLoginRequest,
    service: ManagerAuthService = Depends(get_manager_service),
):
    if not await service.login(body.username, body.password):
        return JSONResponse(
            status_code=401,
            content={"success": False, "message": "Invalid credentials"},
        )
    return ManagerLoginResponse(success=True)


@app.post(
    "/api/manager/change-credentials",
    response_model=SuccessResponse,
    responses={401: {"model": SuccessResponse}},
    tags=["Manager"],
)
async def change_credentials(
    body: ChangeCredentialsRequest,
    service: ManagerAuthService = Depends(get_manager_service),
):
    changed = await service.change_credentials(
        body.current_user,
        body.current_password,
        body.new_user,
        body.new_password,
    )
    if not changed:
        return JSONResponse(status_code=401, content={"success": False})
    return SuccessResponse(success=True)


# =============================================================================
# MENU
# =============================================================================

@app.post(
    "/update-menu",
    response_model=SuccessResponse,
    responses={500: {"model": SuccessResponse}},
    tags=["Menu"],
)
def update_menu(
    payload: Any = Body(...),
    publisher: MenuPublisher = Depends(get_menu_publisher),
):
    """Overwrite the published menu with the request body, unvalidated."""
    try:
        publisher.publish(payload)
    except MenuPublishError:
        return JSONResponse(status_code=500, content={"success": False})
    return SuccessResponse(success=True)


# =============================================================================
# LIVE EVENTS
# =============================================================================

@app.websocket("/ws")
async def order_events(websocket: WebSocket):
    """
    Push ``newOrder`` and ``orderUpdated`` events to a staff display.

    Clients may send ``ping`` to keep the socket alive; anything else
    they send is ignored.
    """
    broadcaster: Broadcaster = websocket.app.state.broadcaster
    await broadcaster.connect(websocket)
    try:
        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                break
            if message.get("text") == "ping":
                await websocket.send_json({"event": "pong"})
    except WebSocketDisconnect:
        pass
    finally:
        broadcaster.disconnect(websocket)


# =============================================================================
# ERROR HANDLERS
# =============================================================================

@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all exception handler."""
    logger.exception(f"Unhandled exception: {exc}")

    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "error": "Internal Server Error",
            "detail": str(exc) if settings.debug else "An unexpected error occurred",
        },
    )


# =============================================================================
# STATIC FILES (published menu and front end)
# =============================================================================

# Mounted last so API routes take precedence
app.mount(
    "/",
    StaticFiles(directory=settings.public_directory, html=True, check_dir=False),
    name="public",
)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("orderdesk.main:app", host=settings.api_host, port=settings.port)
