"""
Blog API — Services Layer
===========================

Service Inventory:
    - PostGateway (abstract): storage interface for blog posts
    - SqlPostGateway: SQLAlchemy implementation of PostGateway
    - PostService: request validation and partial-update construction
"""
