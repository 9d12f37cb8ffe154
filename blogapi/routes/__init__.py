"""
Blog API — Routes Package
===========================

Route Inventory:
    - posts.py:   GET/POST /posts, GET/PUT/DELETE /posts/{id}
    - health.py:  GET /health

Routes stay thin: they extract path and body, call PostService, and set
the status code. Business rules live in services.
"""
