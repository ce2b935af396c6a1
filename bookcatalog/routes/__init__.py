# Routes package init
"""
Book Catalog API: Routes Package
================================

Route Inventory:
    - books.py:   /api/books and /api/books/{id} (GET, POST, DELETE)
    - health.py:  GET /health

Routes stay thin: read the path and body, call BookService, pick the
response format. Validation and store access live in the service.
"""
