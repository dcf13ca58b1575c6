"""
Shared error handling package.

Catches failures raised outside the envelope layer so that no stack
trace or internal detail ever reaches a client.
"""
