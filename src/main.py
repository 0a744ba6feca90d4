from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from src.config import settings
from src.exceptions import register_exception_handlers
from src.auth import router as auth_router
from src.tickets import router as tickets_router
from src.orders import router as orders_router
from src.checkouts import router as checkouts_router
from src.history import router as history_router
from src.notifications import router as notifications_router

# Create FastAPI app
app = FastAPI(
    title=settings.PROJECT_NAME,
    version="1.0.0",
    description="Flight ticket booking API",
    docs_url="/docs",
    redoc_url="/redoc"
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:3000", "http://localhost:5173"],  # web dev servers
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

# Include routers
app.include_router(
    auth_router.router,
    prefix=f"{settings.API_V1_STR}/auth",
    tags=["Authentication"]
)

app.include_router(
    tickets_router,
    prefix=f"{settings.API_V1_STR}/tickets",
    tags=["Tickets"]
)

app.include_router(
    orders_router,
    prefix=f"{settings.API_V1_STR}/orders",
    tags=["Orders"]
)

app.include_router(
    checkouts_router,
    prefix=f"{settings.API_V1_STR}/checkouts",
    tags=["Checkout & Payment"]
)

app.include_router(
    history_router.router,
    prefix=f"{settings.API_V1_STR}/history",
    tags=["Transaction History"]
)

app.include_router(
    notifications_router.router,
    prefix=f"{settings.API_V1_STR}/notifications",
    tags=["Notifications"]
)

@app.get("/")
def root():
    """Root endpoint"""
    return {
        "message": "Flight Ticket Booking API",
        "version": "1.0.0",
        "docs": "/docs"
    }

@app.get("/health")
def health_check():
    """Health check endpoint"""
    return {"status": "healthy"}

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
