"""
Infrastructure layer - logging, settings, and error types.

Nothing in here knows about playlists or schedules; the runtime and web
layers depend on it, never the other way around.
"""
