"""
Domain layer - value objects shared by the runtime and the web layer.

Track entries and play events are plain immutable dataclasses with no
knowledge of locking, clocks or transport.
"""
