# Services package init
"""
Book Catalog API: Services Layer
================================

Business logic between the routes (HTTP) and MongoDB (persistence).

Service Inventory:
    - BookService: list/create/delete-all books, get/comment/delete one book

Services raise the exceptions in bookcatalog.exceptions and never build
HTTP responses, so they can be tested against a mocked collection.
"""
