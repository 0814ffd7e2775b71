from .bookings import router as bookings_router
from .customers import router as customers_router
from .dashboard import router as dashboard_router
from .memberships import router as memberships_router
from .orders import router as orders_router
from .products import router as products_router
from .rooms import router as rooms_router

all_routers = [
    customers_router,
    rooms_router,
    bookings_router,
    products_router,
    orders_router,
    memberships_router,
    dashboard_router,
]
