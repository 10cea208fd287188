"""
==============================================================================
API Package
==============================================================================

HTTP surface of the catalog service. ``router.api_router`` combines the
endpoint routers in ``endpoints``.

==============================================================================
"""
