"""
Review Storage Module.

Durable review collection and the store that owns it.
All create/fetch/delete access to reviews goes through ReviewStore.
"""
