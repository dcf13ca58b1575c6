"""
Envelope bounded context.

Request-scoped entities, content negotiation and API version parsing.
No framework imports allowed.
"""
