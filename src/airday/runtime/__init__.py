"""Runtime scheduling: playlist store, overrides, schedule builder, live resolver."""
