"""Pure domain rules: property types and the booking state machine."""
