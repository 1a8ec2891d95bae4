"""CLI — talk to a local engine, watch its control loop, read its statistics."""
