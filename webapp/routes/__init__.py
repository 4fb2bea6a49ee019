from webapp.routes import cache, clans, cwl, images, service, sheets, stats

ROUTE_TABLES = (
    service.routes,
    clans.routes,
    sheets.routes,
    cwl.routes,
    stats.routes,
    images.routes,
    cache.routes,
)
