"""Game-level managers built on top of the engine: logging, UI commands, metrics."""
