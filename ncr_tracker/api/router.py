from fastapi import APIRouter
from ncr_tracker.api import auth, users, lines, products, clients, reports, reference

router = APIRouter()
router.include_router(auth.router, prefix="/auth", tags=["Auth"])
router.include_router(users.router, prefix="/users", tags=["Users"])
router.include_router(lines.router, prefix="/lines", tags=["Lines"])
router.include_router(products.router, prefix="/products", tags=["Products"])
router.include_router(clients.router, prefix="/clients", tags=["Clients"])
router.include_router(reports.router, prefix="/reports", tags=["Reports"])
router.include_router(reference.router, prefix="/reference", tags=["Reference"])
