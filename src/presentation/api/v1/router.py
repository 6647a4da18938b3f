from fastapi import APIRouter

from .accounts import account_router
from .orders import order_router
from .plans import plan_router

router = APIRouter()

router.include_router(plan_router, tags=["Plans"])
router.include_router(order_router, tags=["Orders"])
router.include_router(account_router, tags=["Accounts"])
