"""
Swipe navigation order for the dashboard portals.

Each portal (company, debtor, admin) has a fixed page order; swiping moves to
the neighbouring page of the same portal.
"""

from typing import Dict, Optional

ROUTE_ORDER: Dict[str, int] = {
    '/company/dashboard': 0,
    '/company/clients': 1,
    '/company/debts': 2,
    '/company/bulk-import': 3,
    '/company/analytics': 4,
    '/company/messages': 5,
    '/debtor/dashboard': 0,
    '/debtor/debts': 1,
    '/debtor/offers': 2,
    '/debtor/payments': 3,
    '/debtor/messages': 4,
    '/admin/dashboard': 0,
    '/admin/companies': 1,
    '/admin/users': 2,
    '/admin/debtors': 3,
    '/admin/config': 4,
}

DIRECTIONS = ('next', 'previous')


def portal_of(route: str) -> str:
    parts = route.split('/')
    return parts[1] if len(parts) > 1 else ''


def portal_routes(portal: str):
    """Routes of a portal in swipe order."""
    routes = [route for route in ROUTE_ORDER if portal_of(route) == portal]
    return sorted(routes, key=ROUTE_ORDER.get)


def resolve_route(path: str) -> Optional[str]:
    """Dashboard route `path` belongs to: an exact match, or the route it is a sub-path of."""
    path = path.rstrip('/') or '/'
    if path in ROUTE_ORDER:
        return path
    for route in ROUTE_ORDER:
        if path.startswith(route + '/'):
            return route
    return None


def adjacent_route(current: str, direction: str) -> Optional[str]:
    """Neighbouring route of `current` in `direction`; None at the ends or for unknown routes."""
    if direction not in DIRECTIONS:
        raise ValueError(f'Unknown direction: {direction}')

    current = resolve_route(current)
    if current is None:
        return None

    routes = portal_routes(portal_of(current))
    position = routes.index(current) + (1 if direction == 'next' else -1)
    if 0 <= position < len(routes):
        return routes[position]
    return None
