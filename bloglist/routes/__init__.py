# Routes package init
"""
Bloglist Backend: API Routes Package
=====================================

Route Inventory:
    - blogs.py:   GET    /api/blogs         (list all blogs)
                  POST   /api/blogs         (create a blog)
                  DELETE /api/blogs/{id}    (delete a blog)
    - health.py:  GET    /health            (service health check)
"""
