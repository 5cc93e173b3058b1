"""
Payment negotiation engine: state machine, typed errors and events.
"""
