"""Pure value types, input conversion and the JSON wire format."""
