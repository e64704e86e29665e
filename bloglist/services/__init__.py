# Services package init
"""
Bloglist Backend: Services Layer
=================================

Service Inventory:
    - validation:       normalize_blog(), required-field rules and defaults
    - blog_repository:  BlogRepository, list/create/delete against the blogs table
"""
