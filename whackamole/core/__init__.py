"""Engine-level building blocks: difficulty profiles, events, timers and state."""
