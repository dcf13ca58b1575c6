"""
Envelope application layer.

Builds success and error envelopes and drives the wrapped
application through the invoker.
"""
