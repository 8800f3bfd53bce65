"""Chat bridge: command parsing, authorization and the processing loop."""
