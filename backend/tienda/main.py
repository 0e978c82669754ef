"""
# `tienda/main.py` - Aplicación

Punto de entrada de FastAPI para la tienda "Frutos Secos Premium".

**Routers públicos:** `/products`, `/categories`, `/advertisements`, `/cart`

**Routers admin (prefijo `/admin`, protegidos con `get_current_admin`):**
`/products`, `/categories`, `/advertisements`, `/upload`, `/dashboard`

Los `ProductValidationError` del motor de precios se devuelven como `400` con la lista
de errores por campo.
"""
import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from tienda.config import settings
from tienda.core.errors import NotFoundError, ProductValidationError
from tienda.routers import admin_dashboard, advertisements, carts, categories, products, uploads

logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

# Initialize FastAPI app
app = FastAPI(
    title="Frutos Secos Premium API",
    description="Catálogo, carrito y back-office de la tienda.",
    version="1.0.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(ProductValidationError)
async def _product_validation_handler(request: Request, exc: ProductValidationError):
    return JSONResponse(status_code=400, content=exc.as_payload())


@app.exception_handler(NotFoundError)
async def _not_found_handler(request: Request, exc: NotFoundError):
    return JSONResponse(status_code=404, content={"detail": exc.message})


# Include public routers
app.include_router(products.router)
app.include_router(categories.router)
app.include_router(advertisements.router)
app.include_router(carts.router)

# Include admin routers (with prefix /admin)
app.include_router(products.admin_router, prefix="/admin")
app.include_router(categories.admin_router, prefix="/admin")
app.include_router(advertisements.admin_router, prefix="/admin")
app.include_router(uploads.admin_router, prefix="/admin")
app.include_router(admin_dashboard.router, prefix="/admin")


@app.get("/", include_in_schema=False)
def root():
    return {"message": "Frutos Secos Premium API running"}


# Run the app directly with uvicorn (for development)
if __name__ == "__main__":
    import uvicorn
    uvicorn.run("tienda.main:app", host="0.0.0.0", port=8000, reload=True)
