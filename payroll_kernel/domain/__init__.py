"""Pure kernel domain primitives: clock, principal, workflow, validation."""
