"""
Core package: states, messages, transitions, the state machine and its builder.
"""
