# Routes package init
"""
Fauna API: API Routes Package
================================

What:  HTTP route handlers that accept requests and return responses.

Route Inventory:
    - animals.py:     /api/animals     (list with joins, get, create, update, delete)
    - species.py:     /api/species     (list, get, create, update, delete)
    - categories.py:  /api/categories  (list, get, create, update, delete)
    - health.py:      GET /health      (service and store status)

Routes stay thin: they extract path, query and body input, call the
matching service, and return its result. Errors are raised as exceptions
and rendered by the handlers registered in main.py.
"""
